from tools.progress_report import _render


def test_render_lists_each_skill_key():
    out = _render(
        {"easy|jumbled_words|": 3},
        {"easy|jumbled_words|": ["a", "b", "c", "d"], "hard|grammar_challenge|verb": ["x"]},
    )
    assert out.splitlines() == [
        "Jumbled Words / Silver Zone (Easy) [easy|jumbled_words|]",
        "  completed: 3",
        "  issued: 4",
        "Grammar Challenge / Diamond Zone (Difficult) / Verb [hard|grammar_challenge|verb]",
        "  completed: 0",
        "  issued: 1",
    ]


def test_render_empty():
    assert _render({}, {}) == "No progress recorded."
