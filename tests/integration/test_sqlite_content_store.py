import json
import sqlite3

import pytest

from src.adapters.sqlite.content_store import SQLiteContentStore, decode_row
from src.adapters.sqlite.fixtures import load_fixture
from src.components.resolver import ContentResolver, ContentStoreError
from tests.conftest import ROOT

FUNNEL_ID = "0f6c8a52-4d3e-4b1a-9c7d-2e5f8a1b3c4d"


@pytest.fixture
def demo_data():
    return json.loads((ROOT / "fixtures" / "demo.json").read_text())


@pytest.fixture
def seeded(db_path, demo_data):
    load_fixture(db_path, demo_data)
    return SQLiteContentStore(db_path)


@pytest.fixture
def sqlite_resolver(seeded, rules):
    return ContentResolver(seeded, rules, trace_id="sqlite-test")


# --- Fixture loading ---


def test_load_fixture_counts(db_path, demo_data):
    counts = load_fixture(db_path, demo_data)
    assert counts["website_pages"] == 3
    assert counts["domain_connections"] == 3


def test_load_fixture_is_repeatable(db_path, demo_data):
    load_fixture(db_path, demo_data)
    load_fixture(db_path, demo_data)
    conn = sqlite3.connect(db_path)
    assert conn.execute("SELECT count(*) FROM website_pages").fetchone()[0] == 3
    conn.close()


def test_load_fixture_rejects_unknown_table(db_path):
    with pytest.raises(ValueError, match="Unknown fixture tables"):
        load_fixture(db_path, {"users": [{"id": "u1"}]})


def test_load_fixture_rejects_bad_columns(db_path):
    with pytest.raises(ValueError, match="Invalid column"):
        load_fixture(db_path, {"seo_pages": [{"page_slug": "x", "title; DROP": "y"}]})


# --- Row decoding ---


def test_decode_row_keeps_plain_text():
    row = decode_row({"content": "Just text", "images": '["https://a/b.png"]', "name": "[1]"})
    assert row["content"] == "Just text"
    assert row["images"] == ["https://a/b.png"]
    # Only JSON columns are decoded
    assert row["name"] == "[1]"


@pytest.mark.parametrize("text", ["2024", "true", "null", "3.5", "\"quoted\""])
def test_decode_row_keeps_json_scalars_as_text(text):
    assert decode_row({"description": text, "content": text}) == {
        "description": text,
        "content": text,
    }


def test_numeric_website_description_still_resolves(db_path, demo_data, rules):
    demo_data["websites"][0]["description"] = "2024"
    load_fixture(db_path, demo_data)
    store = SQLiteContentStore(db_path)
    assert store.get_website("web-acme").description == "2024"

    record = ContentResolver(store, rules).resolve("shop.acme-demo.com", "/about")
    assert record is not None
    assert record.site_name == "Acme Outfitters"


# --- Port reads ---


def test_find_custom_domain_prefers_first_variant(seeded):
    domain = seeded.find_custom_domain(["nope.example.com", "shop.acme-demo.com"])
    assert domain is not None
    assert domain.id == "dom-acme"
    assert seeded.find_custom_domain([]) is None


def test_connections_in_insert_order(seeded):
    connections = seeded.list_domain_connections("dom-acme")
    assert [c.id for c in connections] == ["conn-acme-web", "conn-acme-funnel"]
    assert connections[0].is_homepage is True


def test_website_settings_decoded(seeded):
    website = seeded.get_website("web-acme")
    assert website is not None
    assert website.settings.seo.og_image == "https://cdn.acme-demo.com/og/site.png"
    assert seeded.get_website_by_slug("acme") == website


def test_unpublished_page_is_hidden(seeded):
    assert seeded.get_published_page("web-acme", "draft") is None
    assert seeded.get_published_page("web-acme", "about").id == "page-about"


def test_homepage_page(seeded):
    page = seeded.get_homepage_page("web-acme")
    assert page.id == "page-home"
    assert page.seo_keywords == ["outdoor", "camping", "hiking"]
    assert isinstance(page.content, dict)


def test_first_published_step(seeded):
    assert seeded.get_first_published_step(FUNNEL_ID).id == "step-optin"
    assert seeded.get_published_step(FUNNEL_ID, "checkout").id == "step-checkout"
    assert seeded.get_funnel_by_slug("summer-sale").id == FUNNEL_ID


def test_active_product_scoped_by_store(seeded):
    product = seeded.get_active_product("trail-tent-2p", "store-acme")
    assert product is not None
    assert product.images == ["https://cdn.acme-demo.com/products/tent.jpg"]
    assert product.seo_keywords == ["tent", "backpacking"]
    assert seeded.get_active_product("trail-tent-2p", "store-other") is None
    assert seeded.get_active_product("trail-tent-2p", None) is not None


def test_platform_page(seeded):
    page = seeded.get_platform_page("pricing")
    assert page.title == "Pricing - EcomBuildr"


def test_missing_tables_raise_store_error(tmp_path):
    store = SQLiteContentStore(str(tmp_path / "empty.db"))
    with pytest.raises(ContentStoreError):
        store.get_website("anything")


def test_malformed_row_is_skipped(db_path, seeded):
    conn = sqlite3.connect(db_path)
    conn.execute(
        "INSERT INTO funnel_steps (id, funnel_id, slug, step_order, is_published) "
        "VALUES ('step-broken', ?, 'broken', 'first', 1)",
        (FUNNEL_ID,),
    )
    conn.commit()
    conn.close()
    assert seeded.get_published_step(FUNNEL_ID, "broken") is None


# --- End to end through the resolver ---


def test_resolve_homepage(sqlite_resolver):
    record = sqlite_resolver.resolve("shop.acme-demo.com", "/")
    assert record.title == "Acme Outfitters | Outdoor Gear"
    assert record.description == (
        "Gear up for adventure. Tents, packs & boots tested on real trails."
    )
    assert record.og_image == "https://cdn.acme-demo.com/og/site.png"
    assert record.keywords == ("outdoor", "camping", "hiking")


def test_resolve_page_with_own_image(sqlite_resolver):
    record = sqlite_resolver.resolve("www.shop.acme-demo.com", "/about")
    assert record.title == "About Us - Acme Outfitters"
    assert record.description == "Family owned since 1987. We test everything we sell."
    assert record.og_image == "https://cdn.acme-demo.com/og/about.png"


def test_resolve_funnel_step_on_shared_domain(sqlite_resolver):
    record = sqlite_resolver.resolve("shop.acme-demo.com", "/checkout")
    assert record.source == f"funnel_step|funnel:{FUNNEL_ID}|step:step-checkout"
    assert record.robots == "noindex, follow"


def test_resolve_funnel_domain_root(sqlite_resolver):
    record = sqlite_resolver.resolve("sale.acme-demo.com", "/")
    assert record.title == "Get the Deal - Summer Sale"
    assert record.description == "Save 30% on summer camping gear."
    assert record.og_image == "https://cdn.acme-demo.com/og/summer.png"
    # Funnel-level robots apply to the landing record only, never to steps.
    assert record.robots == "index, follow"


def test_resolve_product(sqlite_resolver):
    record = sqlite_resolver.resolve("shop.acme-demo.com", "/product/trail-tent-2p")
    assert record.title == "Trail Tent 2P | Acme Outfitters"
    assert record.og_image == "https://cdn.acme-demo.com/products/tent.jpg"


def test_resolve_platform_home(sqlite_resolver):
    record = sqlite_resolver.resolve("ecombuildr.com", "/")
    assert record.source == "platform_page|slug:/"
    assert record.site_name == "EcomBuildr"
