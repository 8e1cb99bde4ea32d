import os
import subprocess
import sys
from pathlib import Path

from swagno.generator.hashing import definition_name, map_hash
from swagno.generator.reflection import describe, describe_value

from models import Product


class TestMapHash:
    def test_length(self):
        assert len(map_hash({"a": 1})) == 10

    def test_insertion_order_does_not_matter(self):
        assert map_hash({"a": 1, "b": {"x": 1, "y": 2}}) == map_hash({"b": {"y": 2, "x": 1}, "a": 1})

    def test_different_content_differs(self):
        assert map_hash({"a": 1}) != map_hash({"a": 2})
        assert map_hash({"a": 1}) != map_hash({"b": 1})

    def test_set_values_hash_the_same_across_hash_seeds(self):
        script = (
            "from swagno.generator.hashing import map_hash; "
            "print(map_hash({'tags': {'alpha', 'beta', 'gamma', 'delta'}}))"
        )
        src = str(Path(__file__).parent.parent / "src")
        outputs = set()
        for seed in ("0", "1", "2"):
            env = dict(os.environ, PYTHONHASHSEED=seed, PYTHONPATH=src)
            result = subprocess.run(
                [sys.executable, "-c", script], env=env, capture_output=True, text=True, check=True,
            )
            outputs.add(result.stdout.strip())
        assert len(outputs) == 1

    def test_set_matches_its_members_in_any_order(self):
        assert map_hash({"a": {"x", "y"}}) == map_hash({"a": frozenset(["y", "x"])})


class TestDefinitionName:
    def test_literal_map(self):
        payload = {"status": "ok"}
        assert definition_name(describe_value(payload)) == f"dict_{map_hash(payload)}"

    def test_annotated_map_hashes_key_and_value_types(self):
        assert definition_name(describe(dict[str, int])) == f"dict_{map_hash({'str': 'int'})}"
        assert definition_name(describe(dict[str, int])) != definition_name(describe(dict[str, str]))

    def test_slice_prefix_is_stripped(self):
        assert definition_name(describe(list[Product])) == "models.Product"
