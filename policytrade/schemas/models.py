# policytrade/schemas/models.py

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# =========================
# Policy reference data
# =========================


class PolicyYear(BaseModel):
    """
    One row of the insurer's illustration table. All money amounts use the table currency.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    year: int = Field(..., ge=1, description="Policy year (1-based, end of year).")
    premium_paid_yearly: float = Field(0.0, ge=0, description="Premium paid during this policy year.")
    total_premium_paid: float = Field(..., ge=0, description="Cumulative premiums paid up to and including this year.")
    guaranteed_cv: float = Field(0.0, ge=0, description="Guaranteed cash value at the end of this year.")
    total_cv: float = Field(
        ..., ge=0, description="Total surrender value: guaranteed cash value + reversionary bonus + terminal dividend."
    )


class PolicyTable(BaseModel):
    """
    Year-indexed reference table for the traded policy.

    The premium schedule (yearly_premium × payment_years) drives the original holder's
    contribution cash flows; the table rows drive exit values.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field("5-Pay Participating Whole Life", description="Human-readable policy name.")
    currency: str = Field("HKD", description="ISO currency code used for every amount in the table.")
    yearly_premium: float = Field(200_000.0, gt=0, description="Premium paid each contribution year.")
    payment_years: int = Field(5, ge=1, description="Number of premium-paying years.")
    years: list[PolicyYear] = Field(..., min_length=1, description="Illustration rows, one per policy year.")

    @field_validator("years")
    @classmethod
    def _sorted_unique_years(cls, v: list[PolicyYear]) -> list[PolicyYear]:
        seen: set[int] = set()
        for row in v:
            if row.year in seen:
                raise ValueError(f"duplicate policy year {row.year}")
            seen.add(row.year)
        return sorted(v, key=lambda r: r.year)

    def row(self, year: int) -> PolicyYear | None:
        """Exact-match lookup; None when the table has no such year."""
        for r in self.years:
            if r.year == year:
                return r
        return None

    @property
    def first_year(self) -> int:
        return self.years[0].year

    @property
    def last_year(self) -> int:
        return self.years[-1].year


# =========================
# Trade inputs
# =========================


class TradeParameters(BaseModel):
    """The three adjustable knobs of a secondary-market trade."""

    sale_year: int = Field(10, ge=1, description="Policy year in which the original holder (A) sells.")
    seller_premium_pct: float = Field(
        5.0, ge=0, description="Markup over total cash value paid to the seller, in percent (5 = +5%)."
    )
    broker_fee_pct: float = Field(
        2.0, ge=0, le=10, description="Broker commission charged to the buyer on top of the purchase price, in percent."
    )


# =========================
# Computed outputs
# =========================


class BuyerProjectedIRR(BaseModel):
    """Buyer (C) return if the policy is surrendered in a given future year."""

    surrender_year: int = Field(..., description="Policy year in which the buyer surrenders.")
    holding_years: int = Field(..., description="Years held by the buyer: surrender_year - sale_year.")
    cash_value: float = Field(..., description="Total cash value received on surrender.")
    irr: float | None = Field(None, description="Annualized return; None when the solver did not converge.")
    gain: float = Field(..., description="cash_value - buyer entry cost.")


class SimulationResult(BaseModel):
    """Outcome of one trade simulation for all three parties."""

    sale_year: int = Field(..., description="Policy year of the sale.")
    found: bool = Field(True, description="False when the sale year is missing from the policy table.")
    base_cash_value: float = Field(0.0, description="Total cash value at the sale year.")

    # Seller A
    seller_proceeds: float = Field(0.0, description="Amount received by the seller: base CV × (1 + premium).")
    seller_irr: float | None = Field(0.0, description="Seller exit IRR; None when the solver did not converge.")
    seller_roi: float = Field(0.0, description="Total return on premiums paid: (proceeds - premiums) / premiums.")
    seller_cash_flows: list[float] = Field(default_factory=list, description="Cash-flow series fed to the IRR solver.")

    # Broker B
    broker_cost: float = Field(0.0, description="Price the broker pays the seller.")
    buyer_entry_cost: float = Field(0.0, description="Price paid by the buyer: broker cost × (1 + fee).")
    broker_profit: float = Field(0.0, description="buyer_entry_cost - broker_cost.")
    broker_margin: float = Field(0.0, description="broker_profit / buyer_entry_cost (0 when no entry cost).")

    # Buyer C
    buyer_projected_irrs: list[BuyerProjectedIRR] = Field(
        default_factory=list, description="One row per table year after the sale year."
    )


class SellerExitPoint(BaseModel):
    """Seller outcome for one candidate sale year (exit-timing sweep)."""

    sale_year: int
    seller_proceeds: float
    seller_irr: float | None = None
    seller_roi: float
    buyer_entry_cost: float


# =========================
# AI analysis bundle
# =========================


class DealFacts(BaseModel):
    """Structured facts handed to the deal analyst."""

    model_config = ConfigDict(frozen=True)

    policy_name: str = Field(..., description="Policy description for the prompt.")
    currency: str = Field("HKD", description="Currency code for all amounts.")
    original_principal: float = Field(..., description="Total premium commitment of the policy.")
    sale_year: int
    seller_proceeds: float
    seller_irr: float | None = None
    seller_roi: float = 0.0
    broker_profit: float
    buyer_entry_cost: float
    buyer_irr_5y: float | None = Field(None, description="Buyer IRR if held 5 more years; None when unavailable.")
    buyer_irr_10y: float | None = Field(None, description="Buyer IRR if held 10 more years; None when unavailable.")
    reference_cash_values: dict[int, float] = Field(
        default_factory=dict, description="year -> total cash value around the sale year."
    )

    @model_validator(mode="after")
    def _non_negative_amounts(self) -> DealFacts:
        if self.buyer_entry_cost < 0 or self.seller_proceeds < 0:
            raise ValueError("amounts must be non-negative")
        return self


class DealAnalysis(BaseModel):
    """Free-text commentary returned by the analyst seam."""

    text: str = Field(..., description="Markdown commentary or a human-readable failure message.")
    ok: bool = Field(True, description="False when the text is a failure message rather than analysis.")
    provider: str = Field("none", description='Provider that produced the text ("openai", "mock", "none").')
