"""Shared data models for the quote relay.

Quote fields are opaque strings copied verbatim from the upstream API.
Nothing here parses them as numbers: "5.4321" stays "5.4321".
"""

from dataclasses import astuple, dataclass, fields

# Upstream JSON name -> Quote attribute
API_FIELD_NAMES: dict[str, str] = {
    "code": "code",
    "codein": "codein",
    "name": "name",
    "high": "high",
    "low": "low",
    "varBid": "var_bid",
    "pctChange": "pct_change",
    "bid": "bid",
    "ask": "ask",
    "timestamp": "timestamp",
    "create_date": "create_date",
}


@dataclass(frozen=True)
class Quote:
    """One exchange-rate observation, e.g. USD -> BRL.

    Also the row shape of the quote store, where ``code`` is the primary key.
    """

    code: str
    codein: str = ""
    name: str = ""
    high: str = ""
    low: str = ""
    var_bid: str = ""
    pct_change: str = ""
    bid: str = ""
    ask: str = ""
    timestamp: str = ""
    create_date: str = ""

    @classmethod
    def from_api(cls, payload: dict) -> "Quote":
        """Build a Quote from the inner object of an upstream response.

        Absent fields default to "", unknown fields are ignored.

        Raises:
            TypeError: A known field holds something other than a string.
        """
        values: dict[str, str] = {}
        for api_name, attr in API_FIELD_NAMES.items():
            value = payload.get(api_name, "")
            if not isinstance(value, str):
                raise TypeError(f"field {api_name!r} is {type(value).__name__}, expected str")
            values[attr] = value
        return cls(**values)

    @classmethod
    def from_row(cls, row: tuple) -> "Quote":
        return cls(*row)

    def as_row(self) -> tuple[str, ...]:
        """Column values in table order."""
        return astuple(self)

    @classmethod
    def column_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class BidResponse:
    """Wire payload relayed to clients: just the bid.

    Only built from a fetched Quote, never from loose values.
    """

    bid: str

    @classmethod
    def from_quote(cls, quote: Quote) -> "BidResponse":
        return cls(bid=quote.bid)

    def to_dict(self) -> dict[str, str]:
        return {"bid": self.bid}
