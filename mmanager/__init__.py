"""m-manager: household finance tracking API (budgets, ledger, fixed costs, schedules)."""
