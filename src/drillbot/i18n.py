from __future__ import annotations

STRINGS: dict[str, dict[str, str]] = {
    "title": {"en": "English Skill Test", "uk": "Тест з англійської"},
    "tagline": {"en": "Master English with fun challenges!", "uk": "Опановуйте англійську з цікавими завданнями!"},
    "choose_mode": {"en": "Choose Your Challenge", "uk": "Оберіть завдання"},
    "choose_zone": {"en": "Select a Zone to Begin", "uk": "Оберіть зону, щоб почати"},
    "choose_topic": {"en": "Select a Grammar Topic", "uk": "Оберіть граматичну тему"},
    "sub_zone": {"en": "Challenge: {mode}", "uk": "Завдання: {mode}"},
    "sub_topic": {"en": "Challenge: {mode} | Zone: {zone}", "uk": "Завдання: {mode} | Зона: {zone}"},
    "sub_game": {"en": "Zone: {zone}", "uk": "Зона: {zone}"},
    "sub_game_topic": {"en": "Zone: {zone} | Topic: {topic}", "uk": "Зона: {zone} | Тема: {topic}"},
    "progress": {"en": "{current} / {total} Completed", "uk": "{current} / {total} виконано"},
    "loading": {"en": "Generating a new challenge...", "uk": "Створюємо нове завдання..."},
    "your_sentence": {"en": "Your sentence:", "uk": "Ваше речення:"},
    "jumbled_words": {"en": "Jumbled words:", "uk": "Перемішані слова:"},
    "empty_sentence": {"en": "(tap the words below)", "uk": "(натискайте на слова нижче)"},
    "find_error": {"en": "Find the error:", "uk": "Знайдіть помилку:"},
    "topic": {"en": "Topic: {topic}", "uk": "Тема: {topic}"},
    "word_wrong": {
        "en": "Not quite! Hint: {hint} ({left} attempts left)",
        "uk": "Не зовсім! Підказка: {hint} (залишилось спроб: {left})",
    },
    "word_revealed": {
        "en": "That was a tough one! The correct sentence is: \"{sentence}\"",
        "uk": "Це було складно! Правильне речення: \"{sentence}\"",
    },
    "grammar_correct": {"en": "{praise} Justification: {justification}", "uk": "{praise} Пояснення: {justification}"},
    "grammar_wrong": {"en": "{encouragement} ({left} attempts left)", "uk": "{encouragement} (залишилось спроб: {left})"},
    "grammar_revealed": {
        "en": "The correct answer is \"{answer}\". Justification: {justification}",
        "uk": "Правильна відповідь: \"{answer}\". Пояснення: {justification}",
    },
    "error_busy": {
        "en": "The service is currently busy due to high demand. The app tried a few times but failed. Please wait a moment and try again.",
        "uk": "Сервіс зараз перевантажений. Застосунок спробував кілька разів, але безуспішно. Зачекайте хвилинку і спробуйте знову.",
    },
    "error_word": {
        "en": "Failed to generate a new sentence puzzle. Please try again.",
        "uk": "Не вдалося створити нове речення. Спробуйте ще раз.",
    },
    "error_grammar": {
        "en": "Failed to generate a new grammar challenge. Please try again.",
        "uk": "Не вдалося створити нове граматичне завдання. Спробуйте ще раз.",
    },
    "btn_check": {"en": "✅ Check Answer", "uk": "✅ Перевірити"},
    "btn_skip": {"en": "⏭ Skip Question", "uk": "⏭ Пропустити"},
    "btn_next": {"en": "▶️ Next Challenge", "uk": "▶️ Наступне завдання"},
    "btn_retry": {"en": "🔄 Try Again", "uk": "🔄 Спробувати знову"},
    "btn_clear": {"en": "↩️ Clear", "uk": "↩️ Очистити"},
    "btn_back": {"en": "← Back", "uk": "← Назад"},
    "btn_reset": {"en": "Reset Game", "uk": "Скинути гру"},
    "action_unavailable": {"en": "Not available right now.", "uk": "Зараз недоступно."},
    "stale_button": {"en": "This challenge is no longer active.", "uk": "Це завдання вже неактивне."},
    "nothing_assembled": {"en": "Build a sentence first.", "uk": "Спочатку складіть речення."},
    "progress_reset": {"en": "Progress reset.", "uk": "Прогрес скинуто."},
    "progress_header": {"en": "Progress:", "uk": "Прогрес:"},
    "progress_empty": {"en": "No challenges completed yet.", "uk": "Ще немає виконаних завдань."},
    "move_usage": {"en": "Usage: /move <from> <to>", "uk": "Використання: /move <звідки> <куди>"},
}

APPRECIATION_MESSAGES: list[str] = [
    "You are great!",
    "Great going!",
    "Fabulous!",
    "Congratulations!",
    "Awesome!",
    "Well done!",
    "Superb!",
    "Fantastic!",
]

ENCOURAGING_MESSAGES: list[str] = [
    "That's not quite it, but you're on the right track! Think about the role of the {topic} here.",
    "Close! Take another look at how the {topic} is used. You're nearly there.",
    "Good try! Re-read the sentence carefully and focus on the {topic}. You can do it!",
]

def t(key: str, lang: str) -> str:
    return STRINGS.get(key, {}).get(lang, STRINGS.get(key, {}).get("en", key))
