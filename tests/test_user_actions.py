from database import admin_store, users_store
from schemas import ProfileUpdate, UserAddress
from user_actions import (
    add_item_to_user_cart,
    add_product_to_wishlist,
    clear_user_cart,
    create_admin_account,
    delete_user_by_email,
    get_admin_credentials,
    get_all_users,
    get_user_data,
    initialize_user_account,
    remove_item_from_user_cart,
    remove_product_from_wishlist,
    update_user_addresses,
    update_user_item_quantity_in_cart,
    update_user_password,
    update_user_pin,
    update_user_profile,
    user_exists,
    verify_admin_login,
    verify_user_credentials,
)


def _address(address_id, default=False):
    return UserAddress(id=address_id, street="12 MG Road", city="Pune", state="MH",
                       zip_code="411001", country="India", is_default=default)


def test_initialize_account_hashes_secrets(profile):
    user = initialize_user_account(profile, "secret1", "1234").data
    assert user.profile.email == "asha@example.com"
    assert user.profile.hashed_password != "secret1"
    assert user.profile.hashed_pin != "1234"
    assert user.cart == [] and user.orders == [] and user.wishlist == []

    stored = users_store.read()["asha@example.com"]
    assert stored["profile"]["firstName"] == "Asha"
    assert "hashedPassword" in stored["profile"]


def test_initialize_account_is_idempotent(profile):
    first = initialize_user_account(profile, "secret1", "1234").data
    second = initialize_user_account(profile.model_copy(update={"first_name": "Other"}), "changed", "9999").data
    assert second.profile.first_name == "Asha"
    assert second.profile.hashed_password == first.profile.hashed_password
    assert len(get_all_users()) == 1


def test_lookup_is_case_insensitive(profile):
    initialize_user_account(profile, "secret1", "1234")
    assert get_user_data("ASHA@Example.com") is not None
    assert verify_user_credentials("Asha@example.com", "secret1") is not None
    assert verify_user_credentials("asha@example.com", "wrong") is None
    assert verify_user_credentials("nobody@example.com", "secret1") is None
    assert get_user_data("") is None


def test_update_profile_keeps_secrets(profile):
    user = initialize_user_account(profile, "secret1", "1234").data
    assert update_user_profile("asha@example.com", ProfileUpdate(phone_number="8888888888"))
    updated = get_user_data("asha@example.com")
    assert updated.profile.phone_number == "8888888888"
    assert updated.profile.first_name == "Asha"
    assert updated.profile.hashed_password == user.profile.hashed_password
    assert not update_user_profile("nobody@example.com", ProfileUpdate(first_name="X"))


def test_addresses_keep_a_single_default(profile):
    initialize_user_account(profile, "secret1", "1234")
    assert update_user_addresses("asha@example.com", [_address("a1", True), _address("a2", True), _address("a3")])
    addresses = get_user_data("asha@example.com").addresses
    assert [a.is_default for a in addresses] == [True, False, False]


def test_change_password_and_pin(profile):
    initialize_user_account(profile, "secret1", "1234")

    wrong = update_user_password("asha@example.com", "nope", "secret2")
    assert not wrong.success
    assert wrong.error == "Current password does not match."

    assert update_user_password("asha@example.com", "secret1", "secret2").success
    assert verify_user_credentials("asha@example.com", "secret2") is not None
    assert verify_user_credentials("asha@example.com", "secret1") is None

    assert update_user_pin("asha@example.com", "1234", "4321").success
    assert not update_user_pin("asha@example.com", "1234", "0000").success
    assert not update_user_pin("nobody@example.com", "1234", "0000").success


def test_cart_quantities_clamped_to_stock(profile, sample_products):
    aloe, _, balm, _ = sample_products
    initialize_user_account(profile, "secret1", "1234")

    assert add_item_to_user_cart("asha@example.com", aloe, 3).success
    cart = add_item_to_user_cart("asha@example.com", aloe, 4).data
    assert len(cart) == 1 and cart[0].quantity == 5

    out_of_stock = add_item_to_user_cart("asha@example.com", balm, 1)
    assert not out_of_stock.success
    assert out_of_stock.error == "Lip Balm is out of stock."
    assert not add_item_to_user_cart("asha@example.com", aloe, 0).success

    assert update_user_item_quantity_in_cart("asha@example.com", "p1", 50).data[0].quantity == 5
    assert update_user_item_quantity_in_cart("asha@example.com", "p1", 2).data[0].quantity == 2
    assert update_user_item_quantity_in_cart("asha@example.com", "p1", 0).data == []


def test_remove_and_clear_cart(profile, sample_products):
    aloe, oil, _, _ = sample_products
    initialize_user_account(profile, "secret1", "1234")
    add_item_to_user_cart("asha@example.com", aloe, 1)
    add_item_to_user_cart("asha@example.com", oil, 1)

    cart = remove_item_from_user_cart("asha@example.com", "p1").data
    assert [item.product.id for item in cart] == ["p2"]
    assert clear_user_cart("asha@example.com").success
    assert get_user_data("asha@example.com").cart == []
    assert not clear_user_cart("nobody@example.com").success


def test_wishlist_has_no_duplicates(profile, sample_products):
    aloe = sample_products[0]
    initialize_user_account(profile, "secret1", "1234")
    add_product_to_wishlist("asha@example.com", aloe)
    wishlist = add_product_to_wishlist("asha@example.com", aloe).data
    assert [p.id for p in wishlist] == ["p1"]
    assert remove_product_from_wishlist("asha@example.com", "p1").data == []


def test_delete_user(profile):
    initialize_user_account(profile, "secret1", "1234")
    assert delete_user_by_email("ASHA@example.com").success
    assert get_user_data("asha@example.com") is None
    assert delete_user_by_email("asha@example.com").error == "User not found."


def test_admin_credentials_lifecycle():
    assert not get_admin_credentials().success

    created = create_admin_account("Admin@EarthPuran.com", "adminpass", "2468")
    assert created.success
    assert created.data == "admin@earthpuran.com"
    assert get_admin_credentials().success

    again = create_admin_account("other@earthpuran.com", "x", "1111")
    assert not again.success
    assert "already configured" in again.error

    assert verify_admin_login("admin@earthpuran.com", "adminpass", "2468")
    assert not verify_admin_login("admin@earthpuran.com", "adminpass", "0000")
    assert not verify_admin_login("other@earthpuran.com", "adminpass", "2468")


def test_placeholder_admin_credentials_are_not_usable():
    admin_store.write({
        "email": "REPLACE_WITH_ADMIN_EMAIL",
        "passwordHash": "REPLACE_WITH_BCRYPT_HASH",
        "pinHash": "REPLACE_WITH_BCRYPT_HASH",
    })
    assert not get_admin_credentials().success
    assert not verify_admin_login("REPLACE_WITH_ADMIN_EMAIL", "x", "y")
    assert create_admin_account("admin@earthpuran.com", "adminpass", "2468").success


def test_initialize_account_never_overwrites_unreadable_record(profile):
    legacy = {"profile": {"firstName": "Asha", "email": "asha@example.com"},
              "orders": [{"id": "1", "note": "legacy order"}]}
    users_store.write({"asha@example.com": legacy})

    result = initialize_user_account(profile, "secret1", "1234")
    assert not result.success
    assert "could not be read" in result.error
    assert users_store.read() == {"asha@example.com": legacy}
    assert user_exists("Asha@Example.com")
    assert get_user_data("asha@example.com") is None


def test_initialize_account_reports_write_failure(profile, tmp_path, monkeypatch):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    monkeypatch.setenv("DATA_DIR", str(blocker))

    result = initialize_user_account(profile, "secret1", "1234")
    assert not result.success
    assert result.error == "Could not create account. Could not save user data."


def test_invalid_admin_file_counts_as_unconfigured():
    admin_store.write({"email": 5, "passwordHash": ["x"]})
    result = get_admin_credentials()
    assert not result.success
    assert result.error == "Admin credentials file is invalid."
    assert not verify_admin_login("admin@earthpuran.com", "adminpass", "2468")
    assert create_admin_account("admin@earthpuran.com", "adminpass", "2468").success
    assert get_admin_credentials().success
