"""Flask JSON API over the fincalc calculators."""
