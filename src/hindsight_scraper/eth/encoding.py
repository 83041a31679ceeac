"""JSON conversion for web3 responses."""

from __future__ import annotations

import json
from typing import Any

from hexbytes import HexBytes
from web3.datastructures import AttributeDict


class Web3JsonEncoder(json.JSONEncoder):
    """Encodes web3 responses: ``AttributeDict`` becomes ``dict`` and binary
    values become ``0x`` hex strings. Integers are left to ``json``, which
    writes them at full precision.
    """

    def default(self, o: Any) -> Any:
        if isinstance(o, AttributeDict):
            return dict(o)
        if isinstance(o, HexBytes):
            return o.to_0x_hex()
        if isinstance(o, (bytes, bytearray)):
            return HexBytes(o).to_0x_hex()
        return super().default(o)


def to_json_dict(response: Any) -> dict[str, Any]:
    """Convert a web3 ``AttributeDict`` response to a plain JSON-safe dict."""
    return json.loads(json.dumps(response, cls=Web3JsonEncoder))
