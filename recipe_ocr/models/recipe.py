"""Recipe Pydantic models."""

from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field


class RawPage(BaseModel):
    """Recognized text of one image, tagged with its upload position."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Position of the image in the caller-supplied order")
    text: str = Field("", description="Raw recognized text (may be empty)")


class TextLine(BaseModel):
    """A normalized line of text and its index in the full document."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Line number in the normalized document")
    text: str = Field("", description="Normalized line content")

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


class IngredientLine(BaseModel):
    """Single ingredient split into amount, unit and name."""

    model_config = ConfigDict(frozen=True)

    amount: str = Field("", description="Quantity (e.g., '2', '1/2', '1 1/2', '2-3')")
    unit: str = Field("", description="Unit of measurement (e.g., 'cup', 'tablespoon')")
    ingredientName: str = Field("", description="Ingredient text left after amount and unit")


class Recipe(BaseModel):
    """Structured recipe produced from recognized text."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "title": "Grandma's Soup",
                "prepTime": "15 min",
                "cookTime": "30 min",
                "totalTime": "45 min",
                "servings": "4",
                "ingredients": [
                    {"amount": "2", "unit": "cup", "ingredientName": "carrots"},
                    {"amount": "1", "unit": "", "ingredientName": "onion"},
                ],
                "instructions": "1. Chop vegetables.\n\n2. Simmer for 30 minutes.",
                "dietType": "",
                "mealType": "",
            }
        },
    )

    title: str = Field("", description="Recipe title")
    prepTime: str = Field("", description="Preparation time, e.g. '15 min'")
    cookTime: str = Field("", description="Cooking time, e.g. '70 min'")
    totalTime: str = Field("", description="Total time, e.g. '85 min'")
    servings: str = Field("", description="Servings, a single number or a range like '4-6'")
    ingredients: Tuple[IngredientLine, ...] = Field(default_factory=tuple, description="Ingredients in source order")
    instructions: str = Field("", description="Numbered steps separated by blank lines")
    # Left empty for manual classification downstream
    dietType: str = Field("", description="Always empty")
    mealType: str = Field("", description="Always empty")
