import pytest

from dexview.catalog.pokeapi_service import parse_detail, parse_page
from dexview.catalog.schemas import CatalogPage, CatalogSummary, count_pages


class TestSummaryId:
    def test_trailing_slash_is_ignored(self):
        summary = CatalogSummary(name="pikachu", url="https://pokeapi.co/api/v2/pokemon/25/")
        assert summary.id == "25"

    def test_url_without_trailing_slash(self):
        summary = CatalogSummary(name="bulbasaur", url="https://pokeapi.co/api/v2/pokemon/1")
        assert summary.id == "1"

    def test_id_is_serialised(self):
        summary = CatalogSummary(name="mew", url="https://pokeapi.co/api/v2/pokemon/151/")
        assert summary.model_dump()["id"] == "151"


class TestPageCount:
    @pytest.mark.parametrize(
        "total, expected",
        [(0, 0), (1, 1), (20, 1), (21, 2), (1010, 51)],
    )
    def test_count_pages(self, total, expected):
        assert count_pages(total, 20) == expected

    def test_page_uses_its_own_size(self):
        page = CatalogPage(total_count=25, page_size=10)
        assert page.total_pages == 3

    def test_empty_page(self):
        page = CatalogPage()
        assert page.total_pages == 0
        assert page.items == []


class TestParsePage:
    def test_missing_fields_default_to_empty(self):
        page = parse_page({})
        assert page.total_count == 0
        assert page.items == []
        assert page.total_pages == 0

    def test_null_fields_default_to_empty(self):
        page = parse_page({"count": None, "results": None})
        assert page.total_count == 0
        assert page.items == []

    def test_incomplete_entries_are_skipped(self):
        page = parse_page(
            {
                "count": 3,
                "results": [
                    {"name": "a", "url": "https://x/pokemon/1/"},
                    {"name": "b"},
                    "junk",
                ],
            }
        )
        assert [s.name for s in page.items] == ["a"]
        assert page.total_count == 3


class TestParseDetail:
    def test_sprites_follow_priority_and_skip_nulls(self):
        data = {
            "name": "pikachu",
            "id": 25,
            "height": 4,
            "weight": 60,
            "sprites": {
                "front_default": "front.png",
                "other": {
                    "official-artwork": {"front_default": None},
                    "home": {"front_default": "home.png"},
                    "dream_world": {"front_default": "dream.svg"},
                },
            },
        }
        detail = parse_detail(data)
        assert detail.sprite_candidates == ["home.png", "dream.svg", "front.png"]

    def test_types_and_stats_keep_order(self):
        data = {
            "name": "charmander",
            "types": [{"type": {"name": "fire"}}, {"type": {}}],
            "stats": [
                {"stat": {"name": "hp"}, "base_stat": 39},
                {"stat": {"name": "speed"}, "base_stat": 65},
            ],
        }
        detail = parse_detail(data)
        assert [t.name for t in detail.types] == ["fire"]
        assert [(s.name, s.base_value) for s in detail.stats] == [("hp", 39), ("speed", 65)]
        assert detail.sprite_candidates == []
        assert detail.height == 0

    def test_custom_sprite_paths(self):
        data = {"name": "x", "sprites": {"front_default": "f.png", "back_default": "b.png"}}
        detail = parse_detail(data, sprite_paths=[("back_default",), ("front_default",)])
        assert detail.sprite_candidates == ["b.png", "f.png"]
