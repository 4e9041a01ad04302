from __future__ import annotations

EXTRACT_DISHES_PROMPT = """\
You are a restaurant review analyst. Given a set of customer reviews for a \
restaurant, extract the top 5-10 most recommended dishes. Return a JSON array \
where each element has:
{
  "name": "dish name",
  "description": "brief description based on reviews",
  "price": "price if mentioned, otherwise 'N/A'",
  "mentions": number of times mentioned or implied,
  "sentiment": "positive/mixed/negative"
}
Sort by number of mentions descending. Return ONLY a valid JSON array, no extra text."""

CUISINE_DISHES_PROMPT = """\
You are a world-class food expert. When given a cuisine type and a target \
language, return a JSON array of {count} signature dishes for that cuisine. \
Each dish object MUST have these exact fields:
{{
  "dishName": "name in the original language of the cuisine",
  "origLang": "name in the cuisine's original language",
  "engLang": "English name/translation",
  "prefLang": "name translated into the requested target language",
  "ingredients": "main ingredients, comma-separated",
  "taste": "taste profile description (1 sentence)",
  "eatMethod": "how to eat it (1 sentence)",
  "sauces": "typical sauces/dips/condiments",
  "avgPrice": "estimated typical price range in USD"
}}
Return ONLY a valid JSON array, no extra text."""


def build_extraction_prompt(name: str, address: str, reviews: list[str]) -> str:
    reviews_text = "\n\n".join(f"Review {i}: {r}" for i, r in enumerate(reviews, start=1))
    place = f"{name} ({address})" if address else name
    return (
        f"Restaurant: {place}\n\n"
        f"Customer Reviews:\n{reviews_text}\n\n"
        "Extract the top recommended dishes as JSON."
    )


def build_cuisine_prompt(cuisine: str, language: str) -> str:
    return (
        f"Cuisine: {cuisine}. Target language: {language}. "
        "Return the JSON array of signature dishes."
    )
