"""dorkscan — search dorks through rotating proxies and collect unique result domains."""

__version__ = "1.2.0"
