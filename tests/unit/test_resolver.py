"""Tests for style option resolution."""

import pytest

from scribe.core.resolver import (
    DEFAULT_SAMPLING_BREADTH,
    DEFAULT_TEMPERATURE,
    GENERATION_FORMATS,
    WRITING_FORMATS,
    ResolvedConfig,
    resolve,
)
from scribe.models.request import StyleOptions


class TestLengthResolution:
    """Tests for token budgets by length."""

    @pytest.mark.parametrize(
        "length,expected",
        [
            ("short", 250),
            ("medium", 500),
            ("long", 1000),
            (None, 500),
            ("bogus", 500),
            ("", 500),
            ("  LONG ", 1000),
        ],
    )
    def test_budget_for_every_length(self, length, expected):
        """Test every length, known or not, maps to a defined budget."""
        config = resolve(StyleOptions(length=length))
        assert config.max_output_units == expected
        assert config.max_output_units in {250, 500, 1000}

    def test_none_style_uses_defaults(self):
        """Test a missing style object resolves to the defaults."""
        assert resolve(None) == ResolvedConfig()


class TestTemplateResolution:
    """Tests for template key resolution."""

    @pytest.mark.parametrize("format", GENERATION_FORMATS + WRITING_FORMATS)
    def test_known_formats_kept(self, format):
        """Test known formats resolve to themselves."""
        assert resolve(StyleOptions(format=format)).template_key == format

    @pytest.mark.parametrize("format", [None, "", "poem", "SUMMARY!", "123"])
    def test_unknown_formats_fall_back_to_summary(self, format):
        """Test unrecognised formats resolve to the summary template."""
        assert resolve(StyleOptions(format=format)).template_key == "summary"

    def test_format_normalisation(self):
        """Test case and separators are normalised."""
        assert resolve(StyleOptions(format="Bullet_Points")).template_key == "bullet-points"
        assert resolve(StyleOptions(format="blog post")).template_key == "blog-post"


class TestToneResolution:
    def test_known_tone(self):
        assert resolve(StyleOptions(tone="casual")).tone == "casual"

    def test_unknown_tone_defaults_to_professional(self):
        assert resolve(StyleOptions(tone="sarcastic")).tone == "professional"


class TestSamplingResolution:
    """Tests for temperature and sampling breadth defaults."""

    def test_defaults(self):
        config = resolve(StyleOptions())
        assert config.temperature == DEFAULT_TEMPERATURE == 0.7
        assert config.sampling_breadth == DEFAULT_SAMPLING_BREADTH == 40

    def test_explicit_values_kept(self):
        config = resolve(StyleOptions(), temperature=0.2, sampling_breadth=10)
        assert config.temperature == 0.2
        assert config.sampling_breadth == 10

    @pytest.mark.parametrize("temperature", [-1.0, 5.0, float("nan")])
    def test_out_of_range_temperature_defaults(self, temperature):
        """Test invalid temperatures fall back instead of failing."""
        assert resolve(StyleOptions(), temperature=temperature).temperature == 0.7

    @pytest.mark.parametrize("breadth", [0, -5])
    def test_non_positive_breadth_defaults(self, breadth):
        assert resolve(StyleOptions(), sampling_breadth=breadth).sampling_breadth == 40

    def test_breadth_clamped_to_maximum(self):
        config = resolve(StyleOptions(), sampling_breadth=500, max_sampling_breadth=128)
        assert config.sampling_breadth == 128

    def test_custom_defaults(self):
        config = resolve(
            StyleOptions(),
            default_temperature=0.3,
            default_sampling_breadth=8,
        )
        assert config.temperature == 0.3
        assert config.sampling_breadth == 8
