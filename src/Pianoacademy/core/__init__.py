"""Pure calculations: attendance, tickets, settlement, validation, formatting."""
