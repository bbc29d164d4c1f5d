"""NAV series, lookup and gap filling."""
