"""Tests for the daily entry prompts."""

from meridian.generate.prompts import get_system_prompt, get_user_prompt


class TestSystemPrompt:
    def test_includes_date(self):
        prompt = get_system_prompt("2024-03-01")
        assert '"date": "2024-03-01"' in prompt

    def test_word_range(self):
        assert "600-1000 words" in get_system_prompt("2024-03-01")
        assert "300-500 words" in get_system_prompt("2024-03-01", min_words=300, max_words=500)

    def test_schema_braces_are_literal(self):
        prompt = get_system_prompt("2024-03-01")
        assert "{{" not in prompt
        assert "{\n" in prompt

    def test_newline_instruction_is_escaped(self):
        assert "use \\n for newlines" in get_system_prompt("2024-03-01")

    def test_asks_for_json_only(self):
        assert "ONLY" in get_system_prompt("2024-03-01")

    def test_mentions_signature(self):
        assert "— Meridian" in get_system_prompt("2024-03-01")


class TestUserPrompt:
    def test_includes_date(self):
        assert "2024-03-01" in get_user_prompt("2024-03-01")

    def test_mentions_search(self):
        assert "search" in get_user_prompt("2024-03-01")
