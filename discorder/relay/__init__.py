"""GitHub to Discord relay: parsing, formatting, delivery and the HTTP handler."""
