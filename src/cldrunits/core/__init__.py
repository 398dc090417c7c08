"""Unit-name parsing, exact unit algebra, and localized unit rendering."""
