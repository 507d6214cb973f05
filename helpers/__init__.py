"""Pure helper formulas."""
