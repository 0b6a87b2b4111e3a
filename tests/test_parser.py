"""Tests for recipe text structuring."""

import asyncio

import recipe_ocr.services.parser.ingredients as ingredients_module
import recipe_ocr.services.parser.instructions as instructions_module
import recipe_ocr.services.parser.title as title_module
from recipe_ocr.models.recipe import IngredientLine, Recipe
from recipe_ocr.services.parser import parse_recipe_text
from recipe_ocr.services.parser.document import Document
from recipe_ocr.services.parser.ingredients import extract_ingredients, parse_ingredient_line
from recipe_ocr.services.parser.instructions import (
    INSTRUCTIONS_PLACEHOLDER,
    extract_instructions,
    format_instructions,
)
from recipe_ocr.services.parser.sections import find_ingredients_section, find_instructions_section
from recipe_ocr.services.parser.servings import extract_servings
from recipe_ocr.services.parser.times import derive_total_time, extract_times, to_minutes
from recipe_ocr.services.parser.title import DEFAULT_TITLE, extract_title, is_likely_title
from recipe_ocr.utils.text_cleaner import normalize_text


def parse(text: str) -> Recipe:
    return asyncio.run(parse_recipe_text(text))


# Whole pipeline


def test_parse_full_recipe(soup_text):
    """Test a recipe with title, servings, ingredients and numbered steps."""
    recipe = parse(soup_text)
    assert recipe.title == "Grandma's Soup"
    assert recipe.servings == "4"
    assert recipe.ingredients == (
        IngredientLine(amount="2", unit="cup", ingredientName="carrots"),
        IngredientLine(amount="1", unit="", ingredientName="onion"),
    )
    assert recipe.instructions == "1. Chop vegetables.\n\n2. Simmer for 30 minutes."
    assert recipe.prepTime == recipe.cookTime == recipe.totalTime == ""
    assert recipe.dietType == recipe.mealType == ""


def test_parse_empty_text():
    """Test empty input yields a default recipe."""
    recipe = parse("")
    assert recipe.title == DEFAULT_TITLE
    assert recipe.ingredients == ()
    assert recipe.instructions == INSTRUCTIONS_PLACEHOLDER
    assert recipe.servings == ""
    assert recipe.prepTime == recipe.cookTime == recipe.totalTime == ""


def test_parse_whitespace_only_text():
    """Test blank OCR output behaves like empty input."""
    assert parse("  \n\n \t ") == parse("")


def test_parse_is_deterministic(soup_text):
    """Test the same text always yields the same recipe."""
    assert parse(soup_text) == parse(soup_text)


def test_parse_never_returns_null_fields():
    """Test garbage input still yields every field."""
    data = parse("~~ ## ;; ..\n@@@").model_dump()
    assert set(data) == {
        "title", "prepTime", "cookTime", "totalTime", "servings",
        "ingredients", "instructions", "dietType", "mealType",
    }
    assert all(value is not None for value in data.values())


def test_parse_header_block_card():
    """Test a row of labels with the values on the line below."""
    recipe = parse("Prep Time Cook Time Servings\n15 min 1 hr 4")
    assert recipe.prepTime == "15 min"
    assert recipe.cookTime == "60 min"
    assert recipe.totalTime == "75 min"
    assert recipe.servings == "4"
    assert recipe.ingredients == ()


def test_parse_header_block_values_are_not_ingredients():
    """Test the value row under a header block is not read as an ingredient."""
    recipe = parse("Prep Time Cook Time Servings\n15 min 1 hr 4\n2 eggs\n1. Whisk the eggs.")
    assert recipe.ingredients == (IngredientLine(amount="2", unit="", ingredientName="eggs"),)
    assert recipe.cookTime == "60 min"


def test_parse_recipe_is_immutable(soup_text):
    """Test the ingredient list cannot be changed in place."""
    recipe = parse(soup_text)
    assert isinstance(recipe.ingredients, tuple)
    assert recipe.model_dump()["ingredients"][0] == {"amount": "2", "unit": "cup", "ingredientName": "carrots"}


def test_parse_header_block_with_separators_and_words():
    """Test label/value alignment skips over word values."""
    text = (
        "Prep Time | Cook Time | Servings | Diet Type | Meal Type\n"
        "10 mins | 25 mins | 2-3 | Vegetarian | Dinner"
    )
    recipe = parse(text)
    assert recipe.prepTime == "10 min"
    assert recipe.cookTime == "25 min"
    assert recipe.totalTime == "35 min"
    assert recipe.servings == "2-3"
    assert recipe.dietType == ""
    assert recipe.mealType == ""


def test_parse_numbered_steps_without_headings():
    """Test fallbacks when the text has no section headings."""
    text = "Pancakes\n1 cup flour\n2 eggs\n1. Mix everything together well.\n2. Cook on a hot griddle."
    recipe = parse(text)
    assert recipe.title == "Pancakes"
    assert recipe.ingredients == (
        IngredientLine(amount="1", unit="cup", ingredientName="flour"),
        IngredientLine(amount="2", unit="", ingredientName="eggs"),
    )
    assert recipe.instructions == "1. Mix everything together well.\n\n2. Cook on a hot griddle."


def test_parse_survives_failing_extractor(monkeypatch, soup_text):
    """Test one failing field extractor does not take down the others."""

    def boom(*args):
        raise RuntimeError("broken heuristic")

    monkeypatch.setattr(instructions_module, "first_match", boom)
    recipe = parse(soup_text)
    assert recipe.instructions == INSTRUCTIONS_PLACEHOLDER
    assert recipe.title == "Grandma's Soup"
    assert len(recipe.ingredients) == 2


# Title


def test_title_explicit_label():
    """Test a labeled title line."""
    assert extract_title("Recipe: Lemon Bars\n1 cup sugar") == "Lemon Bars"


def test_title_trailing_recipe_word():
    """Test a title ending in the word recipe."""
    assert extract_title("Banana Bread Recipe\n3 bananas") == "Banana Bread"


def test_title_ignores_prose_ending_in_recipe():
    """Test only the first line can declare a title by ending in recipe."""
    text = "Chicken Tikka Masala\nAdapted from my mom's recipe\n500g chicken"
    assert extract_title(text) == "Chicken Tikka Masala"


def test_title_first_plausible_line():
    """Test the first capitalized short line wins."""
    assert extract_title("Ingredients\nChocolate Cake\nFrosting Notes") == "Chocolate Cake"


def test_title_emphasized_line():
    """Test asterisks are stripped from an emphasized title."""
    assert extract_title("*Best Brownies*\n2 cups flour") == "Best Brownies"


def test_title_falls_back_to_first_line():
    """Test the first non-empty line is used when nothing looks like a title."""
    assert extract_title("\n12 eggs\n3 cups milk") == "12 eggs"


def test_title_default_when_empty():
    """Test empty text gets the default title."""
    assert extract_title("") == DEFAULT_TITLE


def test_title_failure_returns_default(monkeypatch):
    """Test an exception inside title extraction yields the default."""

    def boom(*args):
        raise RuntimeError("broken heuristic")

    monkeypatch.setattr(title_module, "first_match", boom)
    assert extract_title("Soup") == DEFAULT_TITLE


def test_is_likely_title():
    """Test title plausibility checks."""
    assert is_likely_title("Chicken Curry")
    assert not is_likely_title("chicken curry")
    assert not is_likely_title("Ingredients")
    assert not is_likely_title("Prep Time: 10 minutes")
    assert not is_likely_title("A")
    assert not is_likely_title("X" * 51)


# Times


def test_times_labeled_lines_and_derived_total():
    """Test prep + cook fills a missing total."""
    times = derive_total_time(extract_times("Prep Time: 15 minutes\nCook Time: 1 hour 10 minutes"))
    assert times == {"prepTime": "15 min", "cookTime": "70 min", "totalTime": "85 min"}


def test_times_explicit_total_is_kept():
    """Test an explicit total is never overwritten."""
    text = "Prep time: 10 mins\nCook time: 20 mins\nTotal time: 45 minutes"
    assert derive_total_time(extract_times(text))["totalTime"] == "45 min"


def test_times_glued_hours_and_minutes():
    """Test compact durations like 1h30."""
    assert extract_times("Cook time: 1h30")["cookTime"] == "90 min"


def test_times_missing():
    """Test text without times yields empty strings."""
    assert extract_times("Toast\nButter the bread.") == {"prepTime": "", "cookTime": "", "totalTime": ""}


def test_derive_total_needs_both_parts():
    """Test no total is derived from prep alone."""
    assert derive_total_time({"prepTime": "10 min", "cookTime": "", "totalTime": ""})["totalTime"] == ""


def test_to_minutes():
    """Test duration conversion."""
    assert to_minutes("45 mins") == 45
    assert to_minutes("2 hours") == 120
    assert to_minutes("1 1/2 hrs") == 90
    assert to_minutes("1 hour and 15 minutes") == 75


# Servings


def test_servings_range_with_people():
    """Test ranges are kept and trailing words dropped."""
    assert extract_servings("Serves: 4-6 people") == "4-6"


def test_servings_en_dash_range():
    """Test typographic dashes become a plain hyphen."""
    assert extract_servings("Serves 4 – 6") == "4-6"


def test_servings_variants():
    """Test the different ways servings are written."""
    assert extract_servings("Yield: 12 servings") == "12"
    assert extract_servings("Makes 24 cookies") == "24"
    assert extract_servings("Enough for 6 people") == "6"
    assert extract_servings("8 servings") == "8"
    assert extract_servings("Ingredients for 4") == "4"


def test_servings_missing():
    """Test text without servings yields an empty string."""
    assert extract_servings("Toast\nButter the bread.") == ""


# Ingredients


def test_ingredient_fraction_glyph():
    """Test a fraction glyph becomes the amount."""
    assert extract_ingredients(normalize_text("½ cup chopped onion")) == [
        IngredientLine(amount="1/2", unit="cup", ingredientName="chopped onion"),
    ]


def test_parse_ingredient_line_mixed_number():
    """Test mixed numbers and a leading 'of'."""
    assert parse_ingredient_line("2 1/2 cups of flour") == IngredientLine(
        amount="2 1/2", unit="cup", ingredientName="flour"
    )


def test_parse_ingredient_line_range_and_abbreviation():
    """Test ranges and abbreviated units."""
    assert parse_ingredient_line("2-3 tbsp olive oil") == IngredientLine(
        amount="2-3", unit="tablespoon", ingredientName="olive oil"
    )
    assert parse_ingredient_line("2 to 3 cups stock") == IngredientLine(
        amount="2-3", unit="cup", ingredientName="stock"
    )


def test_parse_ingredient_line_bullet_and_glued_unit():
    """Test bullets are stripped and glued units split."""
    assert parse_ingredient_line("• 500g flour") == IngredientLine(
        amount="500", unit="gram", ingredientName="flour"
    )


def test_parse_ingredient_line_without_amount():
    """Test a line with no quantity keeps its whole text as the name."""
    assert parse_ingredient_line("Salt and pepper to taste") == IngredientLine(
        amount="", unit="", ingredientName="Salt and pepper to taste"
    )
    assert parse_ingredient_line("2 cups") == IngredientLine(amount="", unit="", ingredientName="2 cups")


def test_ingredients_heading_with_inline_item():
    """Test text after 'Ingredients:' belongs to the section."""
    text = "Ingredients: 2 eggs\n1 cup milk\nMethod\nWhisk everything."
    assert extract_ingredients(text) == [
        IngredientLine(amount="2", unit="", ingredientName="eggs"),
        IngredientLine(amount="1", unit="cup", ingredientName="milk"),
    ]


def test_ingredients_skip_metadata_lines():
    """Test servings and time lines are not ingredients."""
    text = "4 servings\n15 min prep time\n1 lemon"
    assert extract_ingredients(text) == [IngredientLine(amount="1", unit="", ingredientName="lemon")]


def test_ingredients_failure_returns_empty_list(monkeypatch):
    """Test an exception inside ingredient extraction yields an empty list."""

    def boom(*args):
        raise RuntimeError("broken heuristic")

    monkeypatch.setattr(ingredients_module, "find_ingredients_section", boom)
    assert extract_ingredients("Ingredients\n1 egg") == []


# Sections and instructions


def test_sections_bounded_by_each_other(soup_text):
    """Test the ingredient block stops at the instructions heading."""
    doc = Document.from_text(soup_text)
    ingredients = find_ingredients_section(doc)
    instructions = find_instructions_section(doc)
    assert ingredients.text == "2 cups carrots\n1 onion"
    assert instructions.text == "1. Chop vegetables.\n2. Simmer for 30 minutes."


def test_long_line_starting_with_keyword_is_not_a_heading():
    """Test prose that starts with a heading word is not a heading."""
    doc = Document.from_text("Ingredients are the key to any good dish and matter.\n1 egg")
    assert find_ingredients_section(doc) is None


def test_instructions_printed_before_ingredients():
    """Test an instructions block ends at a later ingredients heading."""
    text = "Method\nStir well.\nIngredients\n1 cup rice"
    assert extract_instructions(text) == "1. Stir well."
    assert extract_ingredients(text) == [IngredientLine(amount="1", unit="cup", ingredientName="rice")]


def test_instructions_unnumbered_prose():
    """Test sentences and blank lines split unnumbered steps."""
    text = (
        "Instructions\n"
        "Preheat the oven.\n"
        "Mix the flour and sugar in a bowl\n"
        "until combined.\n"
        "\n"
        "Bake for 20 minutes."
    )
    assert extract_instructions(text) == format_instructions(
        ["Preheat the oven.", "Mix the flour and sugar in a bowl until combined.", "Bake for 20 minutes."]
    )


def test_instructions_bulleted_steps():
    """Test bullets mark steps."""
    assert extract_instructions("Directions:\n- Whisk eggs\n- Fry in butter") == "1. Whisk eggs\n\n2. Fry in butter"


def test_instructions_action_verb_fallback():
    """Test imperative sentences are used when nothing else matches."""
    text = "Toast\nPreheat the oven and toast the bread slices.\nServe."
    assert extract_instructions(text) == "1. Preheat the oven and toast the bread slices."


def test_instructions_placeholder():
    """Test the placeholder when no steps are found."""
    assert extract_instructions("Just a title") == INSTRUCTIONS_PLACEHOLDER


def test_title_from_first_line():
    """Test a plain first line becomes the title."""
    assert extract_title("Chicken Tikka Masala\nServes 4\n500g chicken") == "Chicken Tikka Masala"


def test_instructions_numbered_without_heading():
    """Test numbered lines are steps even without an instructions heading."""
    text = normalize_text("1. Preheat oven to 450°F\n2. Bake for 20 minutes")
    assert extract_instructions(text) == "1. Preheat oven to 450°F\n\n2. Bake for 20 minutes"
