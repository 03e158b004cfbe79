"""
RepayLab kind constants (frequencies, repayment types, strategies, rule kinds).
"""


class K:
    # === Repayment frequencies ===
    FREQ_WEEKLY = "weekly"
    FREQ_FORTNIGHTLY = "fortnightly"
    FREQ_MONTHLY = "monthly"

    # === Repayment types ===
    TYPE_PRINCIPAL_AND_INTEREST = "principal-and-interest"
    TYPE_INTEREST_ONLY = "interest-only"

    # === Repayment strategies (what happens after an extra repayment) ===
    STRATEGY_REDUCE_TERM = "reduce-term"  # keep payment, finish earlier
    STRATEGY_REDUCE_REPAYMENT = "reduce-repayment"  # keep term, pay less

    # === Extra repayment rule kinds ===
    EXTRA_ONE_OFF = "one-off"
    EXTRA_WEEKLY = "weekly"
    EXTRA_FORTNIGHTLY = "fortnightly"
    EXTRA_MONTHLY = "monthly"
    EXTRA_ANNUAL = "annual"
    EXTRA_CUSTOM = "custom"  # every N months

    # === Extra repayment directions ===
    DIRECTION_DEPOSIT = "deposit"  # reduces the balance
    DIRECTION_WITHDRAW = "withdraw"  # redraw, increases the balance

    @classmethod
    def frequencies(cls) -> list[str]:
        return [cls.FREQ_WEEKLY, cls.FREQ_FORTNIGHTLY, cls.FREQ_MONTHLY]

    @classmethod
    def repayment_types(cls) -> list[str]:
        return [cls.TYPE_PRINCIPAL_AND_INTEREST, cls.TYPE_INTEREST_ONLY]

    @classmethod
    def strategies(cls) -> list[str]:
        return [cls.STRATEGY_REDUCE_TERM, cls.STRATEGY_REDUCE_REPAYMENT]

    @classmethod
    def extra_kinds(cls) -> list[str]:
        """Enumerate all known extra repayment kinds (for validation and docs)."""
        return [
            cls.EXTRA_ONE_OFF,
            cls.EXTRA_WEEKLY,
            cls.EXTRA_FORTNIGHTLY,
            cls.EXTRA_MONTHLY,
            cls.EXTRA_ANNUAL,
            cls.EXTRA_CUSTOM,
        ]

    @classmethod
    def directions(cls) -> list[str]:
        return [cls.DIRECTION_DEPOSIT, cls.DIRECTION_WITHDRAW]


# Calendar periods per year for each repayment frequency
PERIODS_PER_YEAR: dict[str, int] = {
    K.FREQ_WEEKLY: 52,
    K.FREQ_FORTNIGHTLY: 26,
    K.FREQ_MONTHLY: 12,
}

# Occurrences per year of each recurring extra repayment kind
EXTRA_PERIODS_PER_YEAR: dict[str, int] = {
    K.EXTRA_WEEKLY: 52,
    K.EXTRA_FORTNIGHTLY: 26,
    K.EXTRA_MONTHLY: 12,
    K.EXTRA_ANNUAL: 1,
}
