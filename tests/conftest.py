import random

import pytest

from barnacleforge.models.tables import ForgeConfig, RarityRanges


@pytest.fixture
def default_config() -> ForgeConfig:
    return ForgeConfig()


@pytest.fixture
def fixed_config() -> ForgeConfig:
    """Config with single-value power ranges so budgets are deterministic."""
    return ForgeConfig(
        rarity_ranges=RarityRanges(
            common=[4, 4],
            uncommon=[5],
            rare=[8],
            epic=[10],
            legendary=[12],
        )
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


class ScriptedIO:
    """Feeds canned answers to a Prompter and records everything it writes."""

    def __init__(self, answers: list[str]):
        self.answers = list(answers)
        self.prompts: list[str] = []
        self.output: list[str] = []

    def read(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError("No scripted answers left")
        return self.answers.pop(0)

    def write(self, text: str) -> None:
        self.output.append(text)


@pytest.fixture
def scripted_io():
    """Factory: scripted_io(["1", "2"]) -> ScriptedIO."""
    return ScriptedIO
