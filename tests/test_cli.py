"""Tests for CLI rendering helpers."""

import pytest
from rich.console import Console

from study_partner.cli import app as cli
from study_partner.panels.quiz import QuizPanelState, QuizPhase, score_answers, verdict


@pytest.fixture
def recorded_console(monkeypatch) -> Console:
    """Replace the CLI console with one that records output."""
    console = Console(record=True, width=100)
    monkeypatch.setattr(cli, "console", console)
    return console


class TestFormatScore:
    """Test the score colouring."""

    def test_every_verdict_has_a_style(self):
        for score in range(0, 11):
            assert verdict(score, 10) in cli.VERDICT_STYLES

    def test_colour_follows_verdict(self):
        """Test that the colour changes exactly where the verdict does."""
        assert cli.format_score(5, 5) == "[green]5 / 5[/green]"
        assert cli.format_score(4, 5) == "[yellow]4 / 5[/yellow]"
        assert cli.format_score(7, 10) == "[yellow]7 / 10[/yellow]"
        assert cli.format_score(6, 10) == "[red]6 / 10[/red]"


class TestDisplayResults:
    """Test the results table."""

    def test_shows_score_and_verdict(self, recorded_console, sample_questions):
        picks = {0: 1, 1: 0, 2: 3, 3: 2}
        state = QuizPanelState(
            topic="Photosynthesis",
            phase=QuizPhase.SUBMITTED,
            questions=tuple(sample_questions),
            answers=picks,
            score=score_answers(sample_questions, picks),
        )

        cli.display_results(state)

        text = recorded_console.export_text()
        assert "Photosynthesis" in text
        assert "4 / 5" in text
        assert "Great job!" in text
