"""HTTP API for the payroll forecasting engine."""
