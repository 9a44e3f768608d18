"""Tests for loading and dumping YAML org charts."""

import pytest
import yaml

from orgchart_mcp.org_tree import OrgTree
from orgchart_mcp.parser import (
    employee_from_dict,
    employee_to_dict,
    org_to_yaml,
    parse_file,
    parse_yaml,
)


ORG_YAML = """
ceo:
  id: 1
  name: Mark Zuckerberg
  subordinates:
    - id: 2
      name: Sarah Donald
      subordinates:
        - id: 3
          name: Cassandra Reynolds
    - id: 4
      name: Tyler Simpson
"""


def test_parse_wrapped_format():
    ceo = parse_yaml(ORG_YAML)

    assert ceo.id == 1
    assert ceo.name == "Mark Zuckerberg"
    assert [sub.id for sub in ceo.subordinates] == [2, 4]
    assert ceo.subordinates[0].subordinates[0].name == "Cassandra Reynolds"
    assert ceo.subordinates[1].subordinates == []


def test_parse_bare_format():
    ceo = parse_yaml("id: 7\nsubordinates:\n  - id: 8\n")

    assert ceo.id == 7
    assert ceo.name == ""
    assert ceo.get_label() == "#7"
    assert ceo.subordinates[0].id == 8


def test_parse_file(tmp_path):
    path = tmp_path / "org.yaml"
    path.write_text(ORG_YAML)

    assert parse_file(str(path)).subordinates[1].name == "Tyler Simpson"


def test_dump_round_trip_after_move():
    org = OrgTree(parse_yaml(ORG_YAML))
    org.move(3, 4)

    dumped = yaml.safe_load(org_to_yaml(org.ceo))
    assert dumped == {
        "ceo": {
            "id": 1,
            "name": "Mark Zuckerberg",
            "subordinates": [
                {"id": 2, "name": "Sarah Donald"},
                {
                    "id": 4,
                    "name": "Tyler Simpson",
                    "subordinates": [{"id": 3, "name": "Cassandra Reynolds"}],
                },
            ],
        }
    }
    assert employee_to_dict(employee_from_dict(dumped["ceo"])) == dumped["ceo"]


@pytest.mark.parametrize("text, message", [
    ("", "Empty"),
    ("- id: 1\n", "mapping"),
    ("ceo:\n  name: Nobody\n", "missing 'id'"),
    ("ceo:\n  id: one\n", "integer"),
    ("ceo:\n  id: true\n", "integer"),
    ("ceo:\n  id: 1\n  subordinates: 2\n", "must be a list"),
    ("ceo:\n  id: 1\n  subordinates:\n    - id: 2\n    - 3\n", r"ceo\.subordinates\[1\]"),
    ("ceo: &top\n  id: 1\n  subordinates:\n    - *top\n", "repeats an earlier entry"),
    ("ceo:\n  id: 1\n  subordinates:\n    - &dup\n      id: 2\n    - *dup\n", r"ceo\.subordinates\[1\] repeats"),
])
def test_parse_errors(text, message):
    with pytest.raises(ValueError, match=message):
        parse_yaml(text)
