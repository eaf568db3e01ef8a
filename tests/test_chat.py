from sehat_saathi.core import chat


def test_parse_full_reply():
    reply = chat.parse_myth_reply("Status: True\nEnglish: Text A\nHindi: पाठ")

    assert reply.status == "TRUE"
    assert reply.english == "Text A"
    assert reply.hindi == "पाठ"
    assert reply.display_text == "Text A"


def test_parse_strips_bold_and_reads_verdict():
    text = "**Verdict:** This is FALSE.\n**English:** Turmeric does not cure snake bites.\n\n**Hindi:** हल्दी से सांप का काटना ठीक नहीं होता।"

    reply = chat.parse_myth_reply(text)

    assert reply.status == "FALSE"
    assert reply.english == "Turmeric does not cure snake bites."
    assert reply.hindi == "हल्दी से सांप का काटना ठीक नहीं होता।"
    assert reply.raw == text


def test_parse_without_status_line():
    reply = chat.parse_myth_reply("English: Drink clean water.\nHindi: साफ पानी पिएं।")

    assert reply.status is None
    assert reply.english == "Drink clean water."


def test_parse_status_without_verdict_word():
    assert chat.parse_myth_reply("Status: unclear\nEnglish: Ask a doctor.").status is None


def test_parse_english_runs_to_end_without_hindi():
    reply = chat.parse_myth_reply("english: Line one.\nLine two.")

    assert reply.english == "Line one.\nLine two."
    assert reply.hindi is None


def test_missing_english_falls_back_to_raw_text():
    text = "Please visit your nearest health centre."

    reply = chat.parse_myth_reply(text)

    assert reply.english is None
    assert reply.display_text == text


def test_empty_english_section_falls_back_to_raw_text():
    text = "Status: TRUE\nEnglish: "
    assert chat.parse_myth_reply(text).display_text == text


def test_chat_session_appends_parsed_reply():
    asked = []

    def ask(message):
        asked.append(message)
        return "Status: False\nEnglish: Vaccines are safe.\nHindi: टीके सुरक्षित हैं।"

    session = chat.ChatSession(ask)
    bot = session.send("Vaccines cause fever forever")

    assert asked == ["Vaccines cause fever forever"]
    assert bot.text_en == "Vaccines are safe."
    assert bot.text_hi == "टीके सुरक्षित हैं।"
    assert bot.status == "FALSE"
    assert [m.sender for m in session.messages] == ["bot", "user", "bot"]
    assert session.messages[0].text_en == chat.GREETING_EN
    assert len({m.id for m in session.messages}) == 3


def test_chat_session_ignores_blank_input():
    session = chat.ChatSession(lambda message: "unused")
    assert session.send("   ") is None
    assert len(session.messages) == 1


def test_chat_session_reports_errors_inline():
    def ask(message):
        raise RuntimeError("upstream down")

    session = chat.ChatSession(ask)
    bot = session.send("hello")

    assert bot.sender == "bot"
    assert "upstream down" in bot.text_en
    assert bot.text_hi == chat.ERROR_HI


def test_build_chat_prompt_mentions_reply_labels():
    prompt = chat.build_chat_prompt("  Is turmeric milk good?  ")
    assert '"Is turmeric milk good?"' in prompt
    for label in ("Status:", "English:", "Hindi:"):
        assert label in prompt
