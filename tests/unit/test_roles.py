"""Role inference at registration."""

import pytest

from smartcharge.auth.roles import email_domain, infer_role
from smartcharge.db.models import Role
from smartcharge.errors import InvalidInputError

OPERATOR_DOMAINS = ["zorlu.com", "enerji.com", "power.com"]


class TestEmailDomain:
    def test_lowercases_domain(self):
        assert email_domain("Ops@Zorlu.COM") == "zorlu.com"

    def test_missing_at_sign(self):
        assert email_domain("not-an-email") == ""

    def test_last_at_sign_wins(self):
        assert email_domain("a@b@power.com") == "power.com"


class TestInferRole:
    @pytest.mark.parametrize(
        ("email", "expected"),
        [
            ("ops@zorlu.com", Role.OPERATOR),
            ("grid@enerji.com", Role.OPERATOR),
            ("team@power.com", Role.OPERATOR),
            ("OPS@ZORLU.COM", Role.OPERATOR),
            ("ada@example.com", Role.DRIVER),
            ("ops@sub.zorlu.com", Role.DRIVER),
            ("ops@zorlu.com.evil.net", Role.DRIVER),
        ],
    )
    def test_domain_allow_list(self, email, expected):
        assert infer_role(email, operator_domains=OPERATOR_DOMAINS) is expected

    def test_explicit_role_wins_over_domain(self):
        assert infer_role("ops@zorlu.com", "DRIVER", operator_domains=OPERATOR_DOMAINS) is Role.DRIVER
        assert infer_role("ada@example.com", "operator", operator_domains=OPERATOR_DOMAINS) is Role.OPERATOR

    def test_unknown_explicit_role_is_invalid_input(self):
        with pytest.raises(InvalidInputError):
            infer_role("ada@example.com", "ADMIN", operator_domains=OPERATOR_DOMAINS)

    def test_empty_allow_list_means_everyone_drives(self):
        assert infer_role("ops@zorlu.com", operator_domains=[]) is Role.DRIVER
