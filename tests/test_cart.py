"""Cart value type and CartService."""

from unittest.mock import MagicMock

import pytest
from hypothesis import given, strategies as st
from sqlalchemy.exc import OperationalError

from foodorder.domain import cart as cart_module
from foodorder.domain.cart import Cart
from foodorder.domain.errors import ConcurrencyConflict, PersistenceError, ValidationError
from foodorder.services.cart_service import CartService

from tests.conftest import USER_ID, FakeLockService


operations = st.lists(
    st.tuples(st.sampled_from(["add", "remove"]), st.sampled_from(["A", "B", "C"])),
    max_size=60,
)


class TestCart:
    def test_empty_cart(self):
        assert Cart().as_dict() == {}
        assert len(Cart()) == 0

    def test_increment_initializes_to_one(self):
        cart = Cart()
        assert cart.increment("A") == 1
        assert cart.as_dict() == {"A": 1}

    def test_decrement_last_unit_removes_key(self):
        cart = Cart({"A": 1})
        assert cart.decrement("A") == 0
        assert "A" not in cart.as_dict()

    def test_decrement_absent_item_is_noop(self):
        cart = Cart({"B": 2})
        cart.decrement("A")
        assert cart.as_dict() == {"B": 2}

    def test_increment_beyond_bound_is_rejected(self):
        cart = Cart({"A": 3}, max_quantity=3)
        with pytest.raises(ValidationError):
            cart.increment("A")
        assert cart.quantity("A") == 3

    def test_loading_drops_non_positive_quantities(self):
        cart = Cart({"A": 0, "B": -2, "C": 4, "D": True})
        assert cart.as_dict() == {"C": 4}

    def test_loading_caps_oversized_quantities_with_a_warning(self, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(cart_module, "logger", logger)

        cart = Cart({"A": 500, "B": 2}, max_quantity=99)

        assert cart.as_dict() == {"A": 99, "B": 2}
        logger.warning.assert_called_once()
        assert "A" in logger.warning.call_args.args[0]

    def test_as_dict_is_a_copy(self):
        cart = Cart({"A": 1})
        cart.as_dict()["A"] = 0
        assert cart.quantity("A") == 1

    @given(operations)
    def test_quantity_is_adds_minus_removes_floored_at_zero(self, ops):
        cart = Cart()
        expected = {}
        for op, item in ops:
            if op == "add":
                cart.increment(item)
                expected[item] = expected.get(item, 0) + 1
            else:
                cart.decrement(item)
                expected[item] = max(0, expected.get(item, 0) - 1)

        assert cart.as_dict() == {k: v for k, v in expected.items() if v > 0}
        assert 0 not in cart.as_dict().values()


class TestCartService:
    @pytest.fixture()
    def service(self, db, user, lock_service):
        return CartService(db, lock_service)

    def test_get_cart_without_activity_is_empty(self, service):
        assert service.get_cart(USER_ID) == {}

    def test_add_twice_remove_once_then_add(self, service):
        service.add_item(USER_ID, "A")
        service.add_item(USER_ID, "A")
        assert service.remove_item(USER_ID, "A") == {"A": 1}
        assert service.add_item(USER_ID, "A") == {"A": 2}
        assert service.get_cart(USER_ID) == {"A": 2}

    def test_remove_last_unit_deletes_key(self, service):
        service.add_item(USER_ID, "A")
        service.remove_item(USER_ID, "A")
        assert service.get_cart(USER_ID) == {}

    def test_remove_absent_item_leaves_cart_unchanged(self, service):
        service.add_item(USER_ID, "B")
        before = service.get_cart(USER_ID)
        assert service.remove_item(USER_ID, "A") == before
        assert service.get_cart(USER_ID) == before

    def test_mutations_take_the_user_cart_lock(self, service, lock_service):
        service.add_item(USER_ID, "A")
        service.remove_item(USER_ID, "A")
        assert lock_service.locked_users == [USER_ID, USER_ID]

    def test_busy_lock_is_a_conflict(self, service, lock_service):
        lock_service.busy_users.add(USER_ID)
        with pytest.raises(ConcurrencyConflict):
            service.add_item(USER_ID, "A")

    def test_unknown_user_is_persistence_error(self, service):
        with pytest.raises(PersistenceError):
            service.get_cart("ghost")
        with pytest.raises(PersistenceError):
            service.add_item("ghost", "A")

    def test_clear_cart(self, service):
        service.add_item(USER_ID, "A")
        service.clear_cart(USER_ID)
        assert service.get_cart(USER_ID) == {}

    def test_store_failure_is_persistence_error(self, db, user):
        service = CartService(db, FakeLockService())
        service.repo = MagicMock()
        service.repo.get_user.side_effect = OperationalError("SELECT", {}, Exception("db down"))

        with pytest.raises(PersistenceError):
            service.add_item(USER_ID, "A")
        with pytest.raises(PersistenceError):
            service.get_cart(USER_ID)
