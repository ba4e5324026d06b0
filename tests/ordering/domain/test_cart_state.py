from ordering.cart.cart import CartLine, cart_lines, dump_cart, load_cart, set_quantity


class TestSetQuantity:
    def test_adds_a_new_line(self):
        assert set_quantity({}, "prod-a", "M", 2) == {"prod-a": {"M": 2}}

    def test_sets_absolute_quantity(self):
        cart = {"prod-a": {"M": 2}}
        assert set_quantity(cart, "prod-a", "M", 5) == {"prod-a": {"M": 5}}

    def test_adds_second_size_for_same_product(self):
        cart = {"prod-a": {"M": 2}}
        assert set_quantity(cart, "prod-a", "L", 1) == {"prod-a": {"M": 2, "L": 1}}

    def test_zero_removes_size_but_keeps_other_sizes(self):
        cart = {"prod-a": {"M": 2, "L": 1}}
        assert set_quantity(cart, "prod-a", "M", 0) == {"prod-a": {"L": 1}}

    def test_zero_on_last_size_removes_product(self):
        cart = {"prod-a": {"M": 2}}
        assert set_quantity(cart, "prod-a", "M", 0) == {}

    def test_zero_on_missing_line_is_a_no_op(self):
        cart = {"prod-a": {"M": 2}}
        assert set_quantity(cart, "prod-b", "S", 0) == {"prod-a": {"M": 2}}

    def test_does_not_mutate_input(self):
        cart = {"prod-a": {"M": 2}}
        set_quantity(cart, "prod-a", "M", 0)
        assert cart == {"prod-a": {"M": 2}}


class TestStorage:
    def test_empty_values_load_as_empty_cart(self):
        assert load_cart(None) == {}
        assert load_cart("") == {}

    def test_dump_then_load(self):
        cart = {"prod-b": {"S": 1}, "prod-a": {"M": 2}}
        assert load_cart(dump_cart(cart)) == cart


class TestCartLines:
    def test_flattens_sorted(self):
        lines = cart_lines({"prod-b": {"S": 1}, "prod-a": {"M": 2, "L": 3}})
        assert lines == [
            CartLine("prod-a", "L", 3),
            CartLine("prod-a", "M", 2),
            CartLine("prod-b", "S", 1),
        ]
