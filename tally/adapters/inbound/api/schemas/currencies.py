from pydantic import BaseModel, Field

from tally.domain.values import CurrencyConfig


class CurrencyResponse(BaseModel):
    code: str = Field(..., examples=["INR"])
    name: str = Field(..., examples=["INR"])
    symbol: str = Field(..., examples=["₹"])
    scale: int = Field(..., description="Fractional digits of the currency.", examples=[2])
    rounding_mode: str = Field(..., examples=["HALF_EVEN"])
    locale: str = Field(..., examples=["en-IN"])
    smallest_unit: str = Field(..., examples=["paise"])
    supported: bool = Field(
        ..., description="False when the code is unknown and defaults were applied."
    )

    @classmethod
    def from_config(cls, config: CurrencyConfig, supported: bool) -> "CurrencyResponse":
        return cls(
            code=config.code,
            name=config.name,
            symbol=config.symbol,
            scale=config.scale,
            rounding_mode=config.rounding_mode.value,
            locale=config.locale,
            smallest_unit=config.smallest_unit,
            supported=supported,
        )
