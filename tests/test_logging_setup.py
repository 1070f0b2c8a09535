import logging

from rich.console import Console

from core.logging_setup import configure_logging


def _rich_handlers():
    return [h for h in logging.getLogger().handlers if h.get_name() == "iamctl-rich"]


def test_configure_logging_is_idempotent():
    configure_logging("INFO")
    configure_logging("DEBUG")

    assert len(_rich_handlers()) == 1
    assert logging.getLogger().level == logging.DEBUG


def test_unknown_level_falls_back_to_warning():
    configure_logging("chatty")

    assert logging.getLogger().level == logging.WARNING


def test_httpx_is_quiet_unless_debug():
    configure_logging("INFO")
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.DEBUG


def test_messages_reach_console():
    console = Console(record=True, width=120)
    configure_logging("INFO", console=console)

    logging.getLogger("adapters.token_fetcher").info("Requesting token from %s", "https://idp")

    assert "Requesting token from https://idp" in console.export_text()
