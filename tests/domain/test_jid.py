"""Testes de parsing de JID e extração do número do remetente."""

from __future__ import annotations

from menubot.domain.jid import WHATSAPP_USER_SERVER, Jid, user_jid


class TestJid:
    def test_parse_device_jid(self) -> None:
        jid = Jid.parse("27831234567:12@s.whatsapp.net")

        assert jid.user == "27831234567"
        assert jid.device == 12
        assert jid.server == WHATSAPP_USER_SERVER

    def test_parse_agent_and_device(self) -> None:
        jid = Jid.parse("27831234567.1:3@s.whatsapp.net")

        assert jid.agent == 1
        assert jid.device == 3
        assert str(jid) == "27831234567.1:3@s.whatsapp.net"

    def test_number_drops_device_and_agent(self) -> None:
        """Remetente = parte de usuário do JID non-AD."""
        assert Jid.parse("27831234567.1:3@s.whatsapp.net").number == "27831234567"

    def test_to_non_ad(self) -> None:
        non_ad = Jid.parse("27831234567:3@s.whatsapp.net").to_non_ad()
        assert str(non_ad) == "27831234567@s.whatsapp.net"

    def test_server_only(self) -> None:
        jid = Jid.parse("s.whatsapp.net")
        assert jid.user == ""
        assert str(jid) == "s.whatsapp.net"

    def test_user_jid(self) -> None:
        assert str(user_jid("27831234567")) == "27831234567@s.whatsapp.net"
        assert user_jid("27831234567") == Jid.parse("27831234567@s.whatsapp.net")
