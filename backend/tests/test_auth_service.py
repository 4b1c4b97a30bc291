import pytest

from spos.services.auth_service import (
    DuplicateEmailError,
    InvalidCredentialsError,
    normalize_page,
)
from spos.validation import ValidationError, ConflictError


class TestRegistration:
    def test_register_creates_user_and_session(self, sessions):
        user = sessions.register("Ana", "ana@shop.local", "pw1")

        assert sessions.list_users() == [user]
        assert sessions.current_user() == user
        assert user.created_at

    def test_duplicate_email_is_rejected(self, sessions):
        sessions.register("Ana", "ana@shop.local", "pw1")
        sessions.logout()

        with pytest.raises(DuplicateEmailError):
            sessions.register("Other Ana", "ana@shop.local", "pw2")
        with pytest.raises(ConflictError):
            sessions.register("Other Ana", "ana@shop.local", "pw2")

        emails = [u.email for u in sessions.list_users()]
        assert emails.count("ana@shop.local") == 1
        assert sessions.current_user() is None

    def test_email_match_is_case_sensitive(self, sessions):
        sessions.register("Ana", "ana@shop.local", "pw1")
        sessions.register("ANA", "ANA@shop.local", "pw2")
        assert len(sessions.list_users()) == 2

    @pytest.mark.parametrize("name,email,password", [
        ("", "a@b.c", "pw"),
        ("Ana", "", "pw"),
        ("Ana", "a@b.c", ""),
        (None, "a@b.c", "pw"),
        (42, "a@b.c", "pw"),
        ("Ana", 7, "pw"),
        ("Ana", "a@b.c", 1234),
    ])
    def test_missing_fields(self, sessions, name, email, password):
        with pytest.raises(ValidationError):
            sessions.register(name, email, password)
        assert sessions.list_users() == []

    def test_create_user_does_not_log_in(self, sessions):
        sessions.create_user("Ana", "ana@shop.local", "pw1")
        assert sessions.current_user() is None


class TestLogin:
    def test_login_sets_session(self, sessions):
        sessions.create_user("Ana", "ana@shop.local", "pw1")
        user = sessions.login("ana@shop.local", "pw1")

        assert user.name == "Ana"
        assert sessions.current_user() == user

    @pytest.mark.parametrize("email,password", [
        ("ana@shop.local", "wrong"),
        ("nobody@shop.local", "pw1"),
        ("ANA@shop.local", "pw1"),
    ])
    def test_invalid_credentials(self, sessions, email, password):
        sessions.create_user("Ana", "ana@shop.local", "pw1")
        with pytest.raises(InvalidCredentialsError):
            sessions.login(email, password)
        assert sessions.current_user() is None

    def test_login_requires_both_fields(self, sessions):
        with pytest.raises(ValidationError):
            sessions.login("ana@shop.local", "")

    @pytest.mark.parametrize("email,password", [
        ("ana@shop.local", 1234),
        (["ana@shop.local"], "pw1"),
    ])
    def test_login_rejects_non_text_credentials(self, sessions, email, password):
        sessions.create_user("Ana", "ana@shop.local", "pw1")
        with pytest.raises(ValidationError):
            sessions.login(email, password)
        assert sessions.current_user() is None

    def test_stored_non_text_password_never_matches(self, sessions, store):
        store.write_collection("users", [
            {"id": 1, "name": "Old", "email": "old@shop.local", "password": 1234, "created_at": None},
        ])
        with pytest.raises(InvalidCredentialsError):
            sessions.login("old@shop.local", "1234")

    def test_non_ascii_password(self, sessions):
        sessions.create_user("Zoë", "zoe@shop.local", "pässwörd")
        assert sessions.login("zoe@shop.local", "pässwörd").name == "Zoë"

    def test_logout_clears_session(self, sessions):
        sessions.register("Ana", "ana@shop.local", "pw1")
        sessions.logout()
        assert sessions.current_user() is None

    def test_public_dict_has_no_password(self, sessions):
        user = sessions.register("Ana", "ana@shop.local", "pw1")
        assert "password" not in user.to_public_dict()


class TestPageGuard:
    @pytest.mark.parametrize("page", ["home", "dashboard", "addproduct", "sellproduct", "anything"])
    def test_logged_out_is_sent_to_login(self, sessions, page):
        access = sessions.guard_page(page)
        assert access.allowed is False
        assert access.redirect_to == "login"

    @pytest.mark.parametrize("page", ["login", "register", "", None])
    def test_logged_out_may_open_public_pages(self, sessions, page):
        assert sessions.guard_page(page).allowed is True

    @pytest.mark.parametrize("page", ["login", "register.html", ""])
    def test_logged_in_is_sent_to_landing(self, sessions, page):
        sessions.register("Ana", "ana@shop.local", "pw1")
        access = sessions.guard_page(page)
        assert access.allowed is False
        assert access.redirect_to == "home"

    def test_logged_in_may_open_protected_pages(self, sessions):
        sessions.register("Ana", "ana@shop.local", "pw1")
        assert sessions.guard_page("dashboard.html").allowed is True

    @pytest.mark.parametrize("raw,expected", [
        ("/pos/Home.html", "home"),
        ("dashboard", "dashboard"),
        ("", "login"),
        (None, "login"),
        ("sellProduct.HTML", "sellproduct"),
    ])
    def test_normalize_page(self, raw, expected):
        assert normalize_page(raw) == expected
