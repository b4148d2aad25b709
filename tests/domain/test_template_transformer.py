"""Tests for TemplateTransformer."""

import pytest
from ferry.domain.exceptions import FileReadError, MissingParameterError
from ferry.domain.services.template_transformer import (
    TemplateTransformer,
    find_placeholders,
    substitute,
)
from ferry.domain.value_objects.parameter_set import ParameterSet


class TestSubstitute:
    def test_replaces_placeholder(self):
        text, missing = substitute("cpu=${CPU}", ParameterSet({"CPU": "2"}))
        assert text == "cpu=2"
        assert missing == ()

    def test_repeatable_and_idempotent_on_output(self):
        parameters = ParameterSet({"CPU": "2"})
        first, _ = substitute("cpu=${CPU}", parameters)
        second, _ = substitute("cpu=${CPU}", parameters)
        again, _ = substitute(first, parameters)

        assert first == second == again == "cpu=2"

    def test_strict_mode_missing_fails(self):
        with pytest.raises(MissingParameterError) as exc_info:
            substitute("cpu=${CPU}", ParameterSet())
        assert exc_info.value.name == "CPU"

    def test_strict_mode_reports_first_missing_and_all_names(self):
        with pytest.raises(MissingParameterError) as exc_info:
            substitute("${A} ${B} ${A} ${C}", ParameterSet({"B": "x"}))
        assert exc_info.value.name == "A"
        assert exc_info.value.missing == ("A", "C")

    def test_lenient_mode_leaves_placeholder(self):
        text, missing = substitute("cpu=${CPU}", ParameterSet(), False)
        assert text == "cpu=${CPU}"
        assert missing == ("CPU",)

    def test_multiple_occurrences(self):
        text, _ = substitute(
            '{"id": "/${APP}", "labels": {"name": "${APP}"}}',
            ParameterSet({"APP": "web"}),
        )
        assert text == '{"id": "/web", "labels": {"name": "web"}}'

    def test_unrelated_dollar_signs_untouched(self):
        text, missing = substitute("echo $HOME ${}", ParameterSet())
        assert text == "echo $HOME ${}"
        assert missing == ()

    def test_value_containing_placeholder_not_expanded_again(self):
        text, _ = substitute("${A}", ParameterSet({"A": "${B}", "B": "x"}))
        assert text == "${B}"


class TestFindPlaceholders:
    def test_document_order_without_duplicates(self):
        assert find_placeholders("${B} ${A} ${B}") == ("B", "A")


class TestTemplateTransformer:
    def test_transform_file(self, tmp_path):
        descriptor = tmp_path / "app.json"
        descriptor.write_text('{"id": "/web", "cpus": ${CPU}}')

        resolved = TemplateTransformer().transform(
            str(descriptor), ParameterSet({"CPU": "0.5"})
        )

        assert resolved.text == '{"id": "/web", "cpus": 0.5}'
        assert resolved.source == str(descriptor)
        assert resolved.unresolved == ()

    def test_transform_lenient_reports_unresolved(self, tmp_path):
        descriptor = tmp_path / "app.json"
        descriptor.write_text('{"id": "/web", "cmd": "${CMD}"}')

        resolved = TemplateTransformer().transform(
            str(descriptor), ParameterSet(), error_on_missing_params=False
        )

        assert resolved.text == '{"id": "/web", "cmd": "${CMD}"}'
        assert resolved.unresolved == ("CMD",)

    def test_transform_missing_file(self, tmp_path):
        with pytest.raises(FileReadError):
            TemplateTransformer().transform(str(tmp_path / "nope.json"), ParameterSet())
