"""
Dish knowledge services.

Responsibilities:
- Extract the most recommended dishes at a restaurant from its reviews.
- Build a localized catalog of signature dishes per cuisine.
- Reuse cached results before spending LLM quota.
- Bulk pre-generate the English catalog for popular cuisines.
"""
