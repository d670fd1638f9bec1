from unittest.mock import MagicMock

from cli import build_parser, format_amount, print_token_list
from tokenlist.services.state import TokenListState
from tokenlist.types import ContractRef, TokenMetadata, TokenRecord

OWNER = "0x" + "ab" * 20
TOKEN = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def test_format_amount_applies_decimals():
    assert format_amount("1500000", 6) == "1.500000"
    assert format_amount("1234500000000000000000", 18) == "1,234.500000"
    assert format_amount("garbage", 18) == "garbage"


def test_parser_all_flag():
    args = build_parser().parse_args(["tokens", OWNER, "--all"])
    assert args.command == "tokens"
    assert args.address == OWNER
    assert args.show_all is True


def test_print_hides_unregistered(capsys):
    state = TokenListState()
    state.begin(OWNER, 1)
    state.publish((
        TokenRecord(
            metadata=TokenMetadata(symbol="DAI", decimals=18, total_supply="1", balance="2000000000000000000"),
            contract_ref=ContractRef(address=TOKEN, contract=MagicMock()),
            registered=False,
        ),
    ))

    print_token_list(state)

    out = capsys.readouterr().out
    assert "DAI" not in out
    assert "1 unregistered token(s) hidden" in out


def test_print_failure(capsys):
    state = TokenListState()
    state.begin(OWNER, 1)
    state.fail("indexer down")

    print_token_list(state)

    assert "indexer down" in capsys.readouterr().out
