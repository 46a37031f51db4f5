"""Built-in recipe catalog used when external providers return nothing."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from pantrypal.models.recipes import Recipe

_IMAGE_BASE = "https://www.themealdb.com/images/media/meals"

_CATALOG_DATA = [
    {
        "id": 101,
        "title": "Creamy Garlic Pasta",
        "image": f"{_IMAGE_BASE}/qtqwwu1511792650.jpg",
        "readyInMinutes": 25,
        "servings": 4,
        "ingredients": ["pasta", "garlic", "butter", "cream", "parmesan", "parsley"],
        "instructions": (
            "1. Cook pasta according to package directions.\n"
            "2. Mince garlic and sauté in butter until fragrant.\n"
            "3. Add cream and simmer for 5 minutes.\n"
            "4. Toss pasta with sauce and serve with parmesan."
        ),
        "extendedIngredients": [
            "400g pasta",
            "4 cloves garlic, minced",
            "3 tbsp butter",
            "1 cup heavy cream",
            "1/2 cup parmesan cheese",
            "Fresh parsley for garnish",
        ],
    },
    {
        "id": 102,
        "title": "Classic Chicken Stir Fry",
        "image": f"{_IMAGE_BASE}/1529446352.jpg",
        "readyInMinutes": 30,
        "servings": 4,
        "ingredients": [
            "chicken", "broccoli", "carrots", "soy sauce", "garlic", "ginger", "sesame oil",
        ],
        "instructions": (
            "1. Cut chicken into bite-sized pieces.\n"
            "2. Heat oil in wok over high heat.\n"
            "3. Cook chicken until golden, set aside.\n"
            "4. Stir fry vegetables for 3-4 minutes.\n"
            "5. Return chicken, add sauce, and toss."
        ),
        "extendedIngredients": [
            "500g chicken breast",
            "2 cups broccoli florets",
            "2 carrots, sliced",
            "3 tbsp soy sauce",
            "3 cloves garlic",
            "1 tbsp fresh ginger",
            "1 tbsp sesame oil",
        ],
    },
    {
        "id": 103,
        "title": "Vegetable Fried Rice",
        "image": f"{_IMAGE_BASE}/1529445434.jpg",
        "readyInMinutes": 20,
        "servings": 4,
        "ingredients": ["rice", "eggs", "peas", "carrots", "soy sauce", "green onions"],
        "instructions": (
            "1. Use day-old cold rice for best results.\n"
            "2. Scramble eggs in wok, set aside.\n"
            "3. Stir fry vegetables until tender.\n"
            "4. Add rice and soy sauce, toss well.\n"
            "5. Mix in eggs and green onions."
        ),
        "extendedIngredients": [
            "4 cups cooked rice (cold)",
            "3 eggs, beaten",
            "1 cup frozen peas",
            "2 carrots, diced",
            "3 tbsp soy sauce",
            "4 green onions, chopped",
        ],
    },
    {
        "id": 104,
        "title": "Fluffy Pancakes",
        "image": f"{_IMAGE_BASE}/rwuyqx1511383174.jpg",
        "readyInMinutes": 20,
        "servings": 4,
        "ingredients": ["flour", "eggs", "milk", "butter", "baking powder", "maple syrup"],
        "instructions": (
            "1. Mix flour, baking powder, and salt.\n"
            "2. Whisk eggs, milk, and melted butter.\n"
            "3. Combine wet and dry ingredients.\n"
            "4. Cook on griddle until bubbles form, flip.\n"
            "5. Serve with maple syrup."
        ),
        "extendedIngredients": [
            "2 cups all-purpose flour",
            "2 eggs",
            "1.5 cups milk",
            "3 tbsp melted butter",
            "2 tsp baking powder",
            "Maple syrup for serving",
        ],
    },
    {
        "id": 105,
        "title": "Greek Salad",
        "image": f"{_IMAGE_BASE}/k29viq1585565980.jpg",
        "readyInMinutes": 15,
        "servings": 2,
        "ingredients": ["tomatoes", "cucumber", "onion", "olive oil", "feta cheese", "olives"],
        "instructions": (
            "1. Chop tomatoes, cucumber, and onion.\n"
            "2. Add olives and crumbled feta.\n"
            "3. Drizzle with olive oil and oregano.\n"
            "4. Season with salt and pepper.\n"
            "5. Toss gently and serve."
        ),
        "extendedIngredients": [
            "3 ripe tomatoes, chopped",
            "1 cucumber, sliced",
            "1 red onion, sliced",
            "3 tbsp olive oil",
            "100g feta cheese",
            "1/2 cup kalamata olives",
        ],
    },
    {
        "id": 106,
        "title": "Beef Tacos",
        "image": f"{_IMAGE_BASE}/ypxvwv1505333929.jpg",
        "readyInMinutes": 25,
        "servings": 4,
        "ingredients": [
            "ground beef", "onion", "tomatoes", "garlic", "taco shells", "cheese", "lettuce",
        ],
        "instructions": (
            "1. Brown ground beef with onion and garlic.\n"
            "2. Add taco seasoning and tomatoes.\n"
            "3. Simmer for 10 minutes.\n"
            "4. Warm taco shells in oven.\n"
            "5. Assemble with toppings."
        ),
        "extendedIngredients": [
            "500g ground beef",
            "1 onion, diced",
            "2 tomatoes, diced",
            "3 cloves garlic",
            "8 taco shells",
            "1 cup shredded cheese",
            "2 cups shredded lettuce",
        ],
    },
    {
        "id": 107,
        "title": "Mushroom Risotto",
        "image": f"{_IMAGE_BASE}/sywrsu1511463066.jpg",
        "readyInMinutes": 40,
        "servings": 4,
        "ingredients": ["rice", "mushrooms", "onion", "butter", "white wine", "parmesan"],
        "instructions": (
            "1. Sauté mushrooms and set aside.\n"
            "2. Cook onion in butter until soft.\n"
            "3. Add rice and toast for 2 minutes.\n"
            "4. Add wine and stir until absorbed.\n"
            "5. Gradually add broth, stirring constantly.\n"
            "6. Finish with mushrooms and parmesan."
        ),
        "extendedIngredients": [
            "1.5 cups arborio rice",
            "300g mixed mushrooms",
            "1 onion, finely diced",
            "4 tbsp butter",
            "1/2 cup white wine",
            "1/2 cup parmesan cheese",
        ],
    },
    {
        "id": 108,
        "title": "Honey Garlic Salmon",
        "image": f"{_IMAGE_BASE}/1548772327.jpg",
        "readyInMinutes": 25,
        "servings": 2,
        "ingredients": ["salmon", "garlic", "butter", "honey", "lemon"],
        "instructions": (
            "1. Mix honey, soy sauce, garlic, and lemon.\n"
            "2. Season salmon with salt and pepper.\n"
            "3. Sear salmon in butter until golden.\n"
            "4. Add sauce and baste.\n"
            "5. Cook until salmon is done."
        ),
        "extendedIngredients": [
            "2 salmon fillets",
            "4 cloves garlic, minced",
            "2 tbsp butter",
            "3 tbsp honey",
            "1 lemon, juiced",
        ],
    },
    {
        "id": 109,
        "title": "Caprese Sandwich",
        "image": f"{_IMAGE_BASE}/ustsqw1468250014.jpg",
        "readyInMinutes": 10,
        "servings": 2,
        "ingredients": ["bread", "tomatoes", "olive oil", "mozzarella", "basil"],
        "instructions": (
            "1. Slice bread and toast lightly.\n"
            "2. Layer fresh mozzarella slices.\n"
            "3. Add sliced tomatoes.\n"
            "4. Top with fresh basil leaves.\n"
            "5. Drizzle with olive oil and balsamic."
        ),
        "extendedIngredients": [
            "4 slices crusty bread",
            "2 ripe tomatoes, sliced",
            "2 tbsp olive oil",
            "200g fresh mozzarella",
            "Fresh basil leaves",
        ],
    },
    {
        "id": 110,
        "title": "Banana Smoothie Bowl",
        "image": f"{_IMAGE_BASE}/vwuprt1468331656.jpg",
        "readyInMinutes": 10,
        "servings": 1,
        "ingredients": ["bananas", "milk", "honey", "granola", "berries"],
        "instructions": (
            "1. Freeze bananas overnight.\n"
            "2. Blend with milk until thick.\n"
            "3. Pour into bowl.\n"
            "4. Top with granola and berries.\n"
            "5. Drizzle with honey."
        ),
        "extendedIngredients": [
            "2 frozen bananas",
            "1/2 cup milk",
            "1 tbsp honey",
            "1/4 cup granola",
            "1/2 cup mixed berries",
        ],
    },
    {
        "id": 111,
        "title": "Chicken Caesar Wrap",
        "image": f"{_IMAGE_BASE}/llcbn01574260722.jpg",
        "readyInMinutes": 20,
        "servings": 2,
        "ingredients": ["chicken", "lettuce", "garlic", "tortillas", "caesar dressing"],
        "instructions": (
            "1. Grill seasoned chicken breast.\n"
            "2. Slice chicken into strips.\n"
            "3. Chop romaine lettuce.\n"
            "4. Warm tortillas.\n"
            "5. Layer with dressing and wrap tightly."
        ),
        "extendedIngredients": [
            "2 chicken breasts",
            "2 cups romaine lettuce",
            "2 cloves garlic",
            "2 large tortillas",
            "4 tbsp caesar dressing",
        ],
    },
    {
        "id": 112,
        "title": "Tomato Basil Soup",
        "image": f"{_IMAGE_BASE}/stpuws1511191310.jpg",
        "readyInMinutes": 35,
        "servings": 4,
        "ingredients": ["tomatoes", "onion", "garlic", "butter", "basil"],
        "instructions": (
            "1. Sauté onion and garlic in butter.\n"
            "2. Add canned tomatoes and broth.\n"
            "3. Simmer for 20 minutes.\n"
            "4. Blend until smooth.\n"
            "5. Stir in fresh basil and cream."
        ),
        "extendedIngredients": [
            "2 cans crushed tomatoes",
            "1 onion, diced",
            "4 cloves garlic",
            "3 tbsp butter",
            "1/2 cup fresh basil",
        ],
    },
    {
        "id": 113,
        "title": "Spaghetti Carbonara",
        "image": f"{_IMAGE_BASE}/llcbn01574260722.jpg",
        "readyInMinutes": 25,
        "servings": 4,
        "ingredients": ["pasta", "eggs", "bacon", "garlic", "parmesan", "black pepper"],
        "instructions": (
            "1. Cook pasta until al dente.\n"
            "2. Fry bacon until crispy.\n"
            "3. Whisk eggs with parmesan.\n"
            "4. Toss hot pasta with bacon.\n"
            "5. Add egg mixture off heat, toss quickly."
        ),
        "extendedIngredients": [
            "400g spaghetti",
            "4 eggs",
            "200g bacon or pancetta",
            "3 cloves garlic",
            "1 cup parmesan cheese",
            "Fresh black pepper",
        ],
    },
    {
        "id": 114,
        "title": "Grilled Cheese Deluxe",
        "image": f"{_IMAGE_BASE}/xxyupu1468262513.jpg",
        "readyInMinutes": 15,
        "servings": 2,
        "ingredients": ["bread", "cheese", "butter", "tomatoes"],
        "instructions": (
            "1. Butter outside of bread slices.\n"
            "2. Layer cheese between slices.\n"
            "3. Add tomato slices if desired.\n"
            "4. Grill on medium until golden.\n"
            "5. Flip and grill other side."
        ),
        "extendedIngredients": [
            "4 slices bread",
            "4 slices cheddar cheese",
            "2 tbsp butter",
            "1 tomato, sliced (optional)",
        ],
    },
    {
        "id": 115,
        "title": "Teriyaki Chicken Bowl",
        "image": f"{_IMAGE_BASE}/wvpsxx1468256321.jpg",
        "readyInMinutes": 30,
        "servings": 4,
        "ingredients": ["chicken", "rice", "soy sauce", "garlic", "ginger", "honey"],
        "instructions": (
            "1. Cook rice according to package.\n"
            "2. Slice chicken thighs.\n"
            "3. Make teriyaki sauce with soy, honey, garlic.\n"
            "4. Cook chicken and coat with sauce.\n"
            "5. Serve over rice with vegetables."
        ),
        "extendedIngredients": [
            "500g chicken thighs",
            "2 cups rice",
            "4 tbsp soy sauce",
            "3 cloves garlic",
            "1 inch ginger",
            "3 tbsp honey",
        ],
    },
    {
        "id": 116,
        "title": "Avocado Toast",
        "image": f"{_IMAGE_BASE}/rsqwus1511462879.jpg",
        "readyInMinutes": 10,
        "servings": 2,
        "ingredients": ["bread", "eggs", "avocado", "lemon"],
        "instructions": (
            "1. Toast bread until golden.\n"
            "2. Mash avocado with lemon and salt.\n"
            "3. Spread on toast.\n"
            "4. Top with poached egg.\n"
            "5. Season with pepper and chili flakes."
        ),
        "extendedIngredients": [
            "2 slices sourdough bread",
            "2 eggs",
            "1 ripe avocado",
            "1/2 lemon, juiced",
        ],
    },
]

CATALOG: Tuple[Recipe, ...] = tuple(
    Recipe.model_validate({**entry, "source": "catalog"}) for entry in _CATALOG_DATA
)


def list_catalog() -> List[Recipe]:
    """Return the catalog in its fixed display order."""

    return list(CATALOG)


def find_catalog_recipe(
    recipe_id: object, catalog: Optional[Sequence[Recipe]] = None
) -> Optional[Recipe]:
    key = str(recipe_id).strip()
    for recipe in CATALOG if catalog is None else catalog:
        if str(recipe.id) == key:
            return recipe
    return None


def search_catalog(term: str, catalog: Optional[Sequence[Recipe]] = None) -> List[Recipe]:
    """Return catalog recipes whose title or an ingredient contains ``term``."""

    needle = term.strip().lower()
    if not needle:
        return []
    return [
        recipe
        for recipe in (CATALOG if catalog is None else catalog)
        if needle in recipe.title.lower()
        or any(needle in ingredient.name.lower() for ingredient in recipe.ingredients)
    ]


__all__ = ["CATALOG", "find_catalog_recipe", "list_catalog", "search_catalog"]
