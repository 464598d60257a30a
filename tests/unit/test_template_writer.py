"""
Unit tests for import template generation.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from bulk_import.batch.readers import CSVReader
from bulk_import.batch.writers import TemplateWriter, generate_template, template_filename
from bulk_import.core.models import FieldSchema
from bulk_import.core.rules import RuleEngine


pytestmark = pytest.mark.unit


class TestGenerateTemplate:
    """Tests for generate_template"""

    def test_two_lines_header_then_example(self, small_schema):
        content = generate_template(
            small_schema, {"email": "a@b.co", "user_type": "FAMILIA"}
        ).decode("utf-8")

        assert content.split("\n") == [
            "email;user_type;full_name;allowed_groups",
            "a@b.co;FAMILIA;;",
        ]

    def test_header_lists_every_user_field(self, users_schema):
        header = generate_template(users_schema).decode("utf-8").split("\n")[0]

        assert header.split(";") == users_schema.headers
        assert header.startswith("email;user_type;full_name")

    def test_user_template_parses_back_without_errors(self, users_schema, user_engine):
        """The shipped example row is a valid ORIENTADOR with list fields"""
        records = CSVReader().read(generate_template(users_schema))

        assert len(records) == 1
        record = records[0]
        assert record["allowed_groups"] == ["A", "B"]
        assert record["allowed_etapas"] == ["Educación Primaria", "ESO"]
        assert record["center_ids"] == ""

        report = user_engine.validate_batch(records)
        assert report.summary()["valid"] == 1

    def test_small_schema_template_validates(self, small_schema):
        content = generate_template(small_schema, {"email": "a@b.co", "user_type": "X"})
        report = RuleEngine([], schema=small_schema).validate_batch(CSVReader().read(content))

        assert report.summary()["errors"] == 0

    @given(st.lists(
        st.text(alphabet=st.characters(codec="utf-8", exclude_characters="["), max_size=12),
        min_size=4,
        max_size=4,
    ))
    def test_property_template_parses_back_to_example(self, values):
        """Property test: an accepted example is recovered exactly by the CSV reader"""
        schema = FieldSchema(
            entity="alumnos",
            required_fields=["email", "user_type"],
            optional_fields=["full_name", "allowed_groups"],
        )
        example = dict(zip(schema.headers, values))

        try:
            content = generate_template(schema, example)
        except ValueError:
            return

        assert CSVReader().read(content) == [example]

    @pytest.mark.parametrize("value", ["a;b", "line\nbreak", "carriage\rreturn"])
    def test_example_values_cannot_break_the_row(self, small_schema, value):
        with pytest.raises(ValueError, match="full_name"):
            generate_template(small_schema, {"full_name": value})

    @pytest.mark.parametrize("value", [" padded ", "trailing\t", '"quoted"', ' "both" '])
    def test_example_values_altered_by_reader_rejected(self, small_schema, value):
        with pytest.raises(ValueError, match="full_name"):
            generate_template(small_schema, {"full_name": value})

    def test_inner_quotes_and_spaces_kept(self, small_schema):
        example = {"email": "a@b.co", "user_type": "X", "full_name": 'Ana "la Jefa" Ruiz'}

        records = CSVReader().read(generate_template(small_schema, example))

        assert records[0]["full_name"] == 'Ana "la Jefa" Ruiz'

    def test_json_array_example_read_back_as_list(self, small_schema):
        example = {"email": "a@b.co", "user_type": "X", "allowed_groups": '["A", "B"]'}

        records = CSVReader().read(generate_template(small_schema, example))

        assert records[0]["allowed_groups"] == ["A", "B"]

    def test_encoded_as_utf8(self, users_schema):
        content = generate_template(users_schema)

        assert "Juan Pérez García".encode("utf-8") in content


class TestTemplateWriter:
    """Tests for TemplateWriter"""

    def test_filename(self, users_schema):
        assert TemplateWriter(users_schema).filename == "plantilla_importacion_usuarios.csv"
        assert template_filename("alumnos") == "plantilla_importacion_alumnos.csv"

    def test_write(self, tmp_path, users_schema):
        path = TemplateWriter(users_schema).write(tmp_path)

        assert path == tmp_path / "plantilla_importacion_usuarios.csv"
        assert path.read_bytes() == generate_template(users_schema)
