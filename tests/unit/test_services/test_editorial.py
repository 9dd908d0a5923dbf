"""Tests for certificate editorial text."""

import pytest
from unittest.mock import MagicMock, Mock
from src.models.certificate import Signal
from src.models.property import Property
from src.models.space import Space
from src.services.editorial import (
    LangChainEditorialGenerator,
    TemplateEditorialGenerator,
    build_editorial_generator,
)
from src.utils.config import AppConfig

SPACE = Space(name="Flat", city="Lisboa", neighborhood="Arroios", property_type="T1", floor="2", area_m2=45.5)


@pytest.mark.unit
def test_property_one_sentence(default_location):
    generator = TemplateEditorialGenerator()

    assert generator.property_one_sentence(Property(property_type="Condo"), default_location) == (
        "Condo in balanced neighbourhood with moderate daily convenience."
    )
    assert generator.property_one_sentence(Property(), default_location).startswith("Property in ")


@pytest.mark.unit
def test_property_summary(default_location):
    summary = TemplateEditorialGenerator().property_summary(
        Property(address="1 Main St, Los Angeles, CA", property_type="Condo"),
        default_location,
        "Stable",
        "Visit required to verify light and spatial conditions.",
    )

    assert summary.startswith("This Condo at 1 Main St, Los Angeles, CA presents a stable experience profile.")
    assert "Acoustic conditions appear manageable from available data." in summary
    assert summary.endswith("In-person verification is essential before any decision.")


@pytest.mark.unit
def test_space_one_sentence_templates():
    generator = TemplateEditorialGenerator()

    assert generator.space_one_sentence(SPACE, "Strong", "Improving") == (
        "T1 combines strong fundamentals with upward momentum."
    )
    assert generator.space_one_sentence(SPACE, "Unknown", "Stable") == (
        "T1 presents typical urban living characteristics."
    )


@pytest.mark.unit
def test_space_summary_by_signal_balance():
    generator = TemplateEditorialGenerator()
    positive = Signal(name="a", state="positive", short_explanation="")
    sensitive = Signal(name="b", state="sensitive", short_explanation="")

    assert "demonstrates balanced fundamentals" in generator.space_summary(SPACE, "Balanced", [positive])
    assert "46m² layout" in generator.space_summary(SPACE, "Balanced", [positive])
    assert "careful evaluation of 2 sensitive factors" in generator.space_summary(SPACE, "Fragile", [sensitive, sensitive])
    assert "standard characteristics" in generator.space_summary(SPACE, "Balanced", [positive, sensitive])


@pytest.mark.unit
def test_langchain_generator_uses_model_text(default_location):
    model = MagicMock()
    model.invoke.return_value = Mock(content="  A calm condo with everyday errands close by.  ")

    generator = LangChainEditorialGenerator(model)
    text = generator.property_one_sentence(Property(property_type="Condo"), default_location)

    assert text == "A calm condo with everyday errands close by."
    messages = model.invoke.call_args[0][0]
    assert "Condo in balanced neighbourhood" in messages[1].content


@pytest.mark.unit
def test_langchain_generator_falls_back_on_failure(default_location):
    model = MagicMock()
    model.invoke.side_effect = RuntimeError("overloaded")

    generator = LangChainEditorialGenerator(model)
    assert generator.space_one_sentence(SPACE, "Balanced", "Stable") == "T1 offers typical urban living without extremes."

    model.invoke.side_effect = None
    model.invoke.return_value = Mock(content="")
    assert generator.property_one_sentence(Property(), default_location).startswith("Property in ")


@pytest.mark.unit
def test_build_editorial_generator_defaults_to_templates():
    assert isinstance(build_editorial_generator(AppConfig()), TemplateEditorialGenerator)
    assert isinstance(build_editorial_generator(AppConfig(editorial_backend="llm")), TemplateEditorialGenerator)
