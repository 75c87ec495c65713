"""
Tests for CartService
"""

import pytest
from sqlalchemy.exc import OperationalError

from app.data.models import CartModel, ProductModel
from app.domain.errors import CartConflictError, StoreUnavailable, ValidationError
from app.repos.cart_repo import CartRepo
from app.repos.product_repo import ProductRepo
from app.services.cart_service import UNKNOWN_PRODUCT_NAME, CartService, enrich_items


class TestEnrichItems:
    """Tests for the read-time join between line items and products."""

    def test_matched_and_dangling_items(self):
        product = ProductModel(id="abc", name="facewash", price=2499.99, image=["a.jpg"])
        items = [
            {"productId": "abc", "quantity": 2},
            {"productId": "gone", "quantity": 1},
        ]

        enriched = enrich_items(items, [product])

        assert enriched[0] == {
            "product_id": "abc",
            "quantity": 2,
            "name": "facewash",
            "price": 2499.99,
            "image": ["a.jpg"],
        }
        assert enriched[1] == {
            "product_id": "gone",
            "quantity": 1,
            "name": UNKNOWN_PRODUCT_NAME,
            "price": 0,
            "image": [],
        }

    def test_unpriced_product_reports_zero(self):
        product = ProductModel(id="w", name="Classic Wrist Watch", price=None, image=[])

        enriched = enrich_items([{"productId": "w", "quantity": 1}], [product])

        assert enriched[0]["price"] == 0
        assert enriched[0]["name"] == "Classic Wrist Watch"

    def test_empty_cart(self):
        assert enrich_items([], []) == []


class TestCartServiceReads:
    """Tests for get_cart."""

    def test_get_cart_creates_once(self, db_session):
        service = CartService(db_session)

        first = service.get_cart("u1")
        second = service.get_cart("u1")

        assert first == {"user_id": "u1", "items": []}
        assert second == first
        assert db_session.query(CartModel).filter_by(user_id="u1").count() == 1

    def test_get_cart_does_not_bump_version(self, db_session):
        service = CartService(db_session)
        service.get_cart("u1")
        service.get_cart("u1")

        cart = CartRepo(db_session).get_cart_by_user("u1")
        assert cart.version == 1

    def test_get_cart_uses_one_batched_lookup(self, db_session, sample_product, monkeypatch):
        service = CartService(db_session)
        service.upsert_item("u1", sample_product.id, 1)
        service.upsert_item("u1", "other", 1)

        calls = []
        original = ProductRepo.find_by_ids

        def spy(self, product_ids):
            calls.append(set(product_ids))
            return original(self, product_ids)

        monkeypatch.setattr(ProductRepo, "find_by_ids", spy)

        cart = service.get_cart("u1")

        assert calls == [{sample_product.id, "other"}]
        assert [i["name"] for i in cart["items"]] == ["facewash", UNKNOWN_PRODUCT_NAME]

    def test_lost_creation_race_reuses_existing_cart(self, db_session, monkeypatch):
        # another request inserted the cart between our lookup and insert
        db_session.add(CartModel(user_id="u1", items=[{"productId": "p1", "quantity": 3}], version=1))
        db_session.commit()

        original = CartRepo.get_cart_by_user
        lookups = {"n": 0}

        def stale_first_lookup(self, user_id):
            lookups["n"] += 1
            if lookups["n"] == 1:
                return None
            return original(self, user_id)

        monkeypatch.setattr(CartRepo, "get_cart_by_user", stale_first_lookup)

        cart = CartService(db_session).get_cart("u1")

        assert cart["items"][0]["product_id"] == "p1"
        assert cart["items"][0]["quantity"] == 3
        assert db_session.query(CartModel).count() == 1

    def test_invalid_user_id(self, db_session):
        with pytest.raises(ValidationError):
            CartService(db_session).get_cart("")
        with pytest.raises(ValidationError):
            CartService(db_session).get_cart(None)
        with pytest.raises(ValidationError):
            CartService(db_session).get_cart("x" * 129)


class TestCartServiceWrites:
    """Tests for upsert_item and remove_item."""

    def test_upsert_overwrites(self, db_session):
        service = CartService(db_session)

        service.upsert_item("u1", "p1", 2)
        cart = service.upsert_item("u1", "p1", 5)

        assert cart["items"] == [{"product_id": "p1", "quantity": 5}]

    def test_upsert_appends_in_order(self, db_session):
        service = CartService(db_session)

        service.upsert_item("u1", "p1", 1)
        cart = service.upsert_item("u1", "p2", 2)

        assert [i["product_id"] for i in cart["items"]] == ["p1", "p2"]

    def test_each_write_bumps_version(self, db_session):
        service = CartService(db_session)
        service.upsert_item("u1", "p1", 1)
        service.upsert_item("u1", "p1", 2)
        service.remove_item("u1", "p1")

        assert CartRepo(db_session).get_cart_by_user("u1").version == 4

    def test_persisted_items_are_bare_pairs(self, db_session, sample_product):
        service = CartService(db_session)
        service.upsert_item("u1", sample_product.id, 1)
        service.get_cart("u1")

        stored = CartRepo(db_session).get_cart_by_user("u1")
        assert stored.items == [{"productId": sample_product.id, "quantity": 1}]

    @pytest.mark.parametrize("quantity", [0, -3, 1.5, "2", True, None])
    def test_upsert_rejects_bad_quantity(self, db_session, quantity):
        with pytest.raises(ValidationError):
            CartService(db_session).upsert_item("u1", "p1", quantity)

        assert db_session.query(CartModel).count() == 0

    def test_remove_without_cart(self, db_session):
        assert CartService(db_session).remove_item("u1", "p1") is None
        assert db_session.query(CartModel).count() == 0

    def test_remove_all_matches(self, db_session):
        # legacy document with a duplicate line item
        db_session.add(
            CartModel(
                user_id="u1",
                items=[
                    {"productId": "p1", "quantity": 1},
                    {"productId": "p2", "quantity": 1},
                    {"productId": "p1", "quantity": 4},
                ],
                version=1,
            )
        )
        db_session.commit()

        cart = CartService(db_session).remove_item("u1", "p1")

        assert cart["items"] == [{"product_id": "p2", "quantity": 1}]


class TestOptimisticWrites:
    """Version conflicts are retried from a fresh read, then surfaced."""

    def test_conflict_is_retried(self, db_session, monkeypatch):
        service = CartService(db_session, write_attempts=3)
        service.upsert_item("u1", "p1", 1)

        original = CartRepo.update_cart_version
        attempts = {"n": 0}

        def concurrent_writer_once(self, cart_id, old_version, new_data):
            attempts["n"] += 1
            if attempts["n"] == 1:
                # someone else appends p9 and commits first
                original(
                    self,
                    cart_id,
                    old_version,
                    {
                        "items": [{"productId": "p1", "quantity": 1}, {"productId": "p9", "quantity": 9}],
                        "version": old_version + 1,
                    },
                )
                self.db.commit()
                return 0
            return original(self, cart_id, old_version, new_data)

        monkeypatch.setattr(CartRepo, "update_cart_version", concurrent_writer_once)

        cart = service.upsert_item("u1", "p2", 2)

        assert attempts["n"] == 2
        # the other writer's p9 survived
        assert cart["items"] == [
            {"product_id": "p1", "quantity": 1},
            {"product_id": "p9", "quantity": 9},
            {"product_id": "p2", "quantity": 2},
        ]

    def test_conflict_gives_up(self, db_session, monkeypatch):
        service = CartService(db_session, write_attempts=2)
        service.upsert_item("u1", "p1", 1)

        monkeypatch.setattr(CartRepo, "update_cart_version", lambda self, cart_id, old_version, new_data: 0)

        with pytest.raises(CartConflictError):
            service.upsert_item("u1", "p1", 3)

        assert CartRepo(db_session).get_cart_by_user("u1").items == [{"productId": "p1", "quantity": 1}]


class TestStoreFailures:
    def test_store_error_becomes_store_unavailable(self, db_session, monkeypatch):
        def boom(self, user_id):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(CartRepo, "get_cart_by_user", boom)

        with pytest.raises(StoreUnavailable):
            CartService(db_session).get_cart("u1")
        with pytest.raises(StoreUnavailable):
            CartService(db_session).upsert_item("u1", "p1", 1)
