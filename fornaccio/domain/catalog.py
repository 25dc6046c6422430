# Default menu used by `fornaccio-cli seed`.

DEFAULT_INGREDIENTS = [
    # Base
    {"id": "tomato-sauce", "name": "Sauce Tomate San Marzano", "price": 0, "category": "base"},
    {"id": "creme-fraiche", "name": "Crème Fraîche", "price": 0, "category": "base"},
    {"id": "base-white", "name": "Base Blanche (Crème)", "price": 0, "category": "base"},
    # Cheese
    {"id": "mozzarella", "name": "Mozzarella Fior di Latte", "price": 1.5, "category": "cheese"},
    {"id": "buffalo-mozzarella", "name": "Mozzarella di Bufala", "price": 3, "category": "cheese"},
    {"id": "gorgonzola", "name": "Gorgonzola DOP", "price": 2, "category": "cheese"},
    {"id": "parmesan", "name": "Parmigiano Reggiano", "price": 1.5, "category": "cheese"},
    {"id": "goat-cheese", "name": "Chèvre Affiné", "price": 2, "category": "cheese"},
    # Meat
    {"id": "spicy-salami", "name": "Spianata Piccante", "price": 2, "category": "meat"},
    {"id": "parma-ham", "name": "Jambon de Parme (24 mois)", "price": 3, "category": "meat"},
    {"id": "cooked-ham", "name": "Jambon Blanc aux Herbes", "price": 2, "category": "meat"},
    {"id": "egg", "name": "Œuf Bio", "price": 1, "category": "meat"},
    {"id": "anchovies", "name": "Anchois de Cetara", "price": 2, "category": "meat"},
    # Vegetable
    {"id": "basil", "name": "Basilic Frais", "price": 0.5, "category": "vegetable"},
    {"id": "mushrooms", "name": "Champignons de Paris", "price": 1, "category": "vegetable"},
    {"id": "cherry-tomatoes", "name": "Tomates Cerises", "price": 1.5, "category": "vegetable"},
    {"id": "arugula", "name": "Roquette", "price": 1, "category": "vegetable"},
    {"id": "olives", "name": "Olives Taggiasca", "price": 1, "category": "vegetable"},
    {"id": "peppers", "name": "Poivrons Grillés", "price": 1.5, "category": "vegetable"},
    {"id": "zucchini", "name": "Courgettes", "price": 1.5, "category": "vegetable"},
    {"id": "eggplant", "name": "Aubergines", "price": 1.5, "category": "vegetable"},
    {"id": "capers", "name": "Câpres au Sel", "price": 1, "category": "vegetable"},
    {"id": "artichokes", "name": "Cœurs d'Artichauts", "price": 2, "category": "vegetable"},
    # Finish
    {"id": "truffle-oil", "name": "Huile de Truffe Blanche", "price": 2, "category": "finish"},
    {"id": "honey", "name": "Miel d'Acacia", "price": 1, "category": "finish"},
]

DEFAULT_PIZZAS = [
    {
        "id": "margherita",
        "name": "Margherita",
        "description": "L'incontournable. Sauce tomate San Marzano, mozzarella fior di latte, basilic frais, huile d'olive vierge.",
        "base_price": 12,
        "image": "/static/pizza-margherita.png",
        "ingredients": ["tomato-sauce", "mozzarella", "basil"],
    },
    {
        "id": "diavola",
        "name": "Diavola",
        "description": "Pour les amateurs de piquant. Sauce tomate, mozzarella, spianata piccante, olives noires.",
        "base_price": 14,
        "image": "/static/pizza-diavola.png",
        "ingredients": ["tomato-sauce", "mozzarella", "spicy-salami", "olives"],
    },
    {
        "id": "tartufo",
        "name": "Tartufo",
        "description": "Élégance et saveurs. Crème de truffe, mozzarella, champignons, huile de truffe.",
        "base_price": 18,
        "image": "/static/pizza-tartufo.png",
        "ingredients": ["creme-fraiche", "mozzarella", "mushrooms", "truffle-oil"],
    },
    {
        "id": "regina",
        "name": "Regina",
        "description": "La reine des classiques. Sauce tomate, mozzarella, jambon blanc, champignons frais.",
        "base_price": 13,
        "image": "/static/pizza-regina.png",
        "ingredients": ["tomato-sauce", "mozzarella", "cooked-ham", "mushrooms"],
    },
    {
        "id": "4-formaggi",
        "name": "4 Formaggi",
        "description": "L'alliance parfaite. Mozzarella, gorgonzola, parmesan, chèvre.",
        "base_price": 15,
        "image": "/static/pizza-4-formaggi.png",
        "ingredients": ["base-white", "mozzarella", "gorgonzola", "parmesan", "goat-cheese"],
    },
    {
        "id": "calzone",
        "name": "Calzone",
        "description": "Le chausson gourmand. Sauce tomate, mozzarella, jambon, œuf (à l'intérieur).",
        "base_price": 14,
        "image": "/static/pizza-calzone.png",
        "ingredients": ["tomato-sauce", "mozzarella", "cooked-ham", "egg"],
    },
    {
        "id": "vegetariana",
        "name": "Vegetariana",
        "description": "Fraîcheur du jardin. Sauce tomate, mozzarella, poivrons, courgettes, aubergines grillées.",
        "base_price": 14,
        "image": "/static/pizza-vegetariana.png",
        "ingredients": ["tomato-sauce", "mozzarella", "peppers", "zucchini", "eggplant"],
    },
    {
        "id": "napoli",
        "name": "Napoli",
        "description": "L'authentique. Sauce tomate, mozzarella, anchois, câpres, origan.",
        "base_price": 13,
        "image": "/static/pizza-napoli.png",
        "ingredients": ["tomato-sauce", "mozzarella", "anchovies", "capers"],
    },
    {
        "id": "capricciosa",
        "name": "Capricciosa",
        "description": "La capricieuse. Sauce tomate, mozzarella, jambon, champignons, artichauts, olives.",
        "base_price": 15,
        "image": "/static/pizza-capricciosa.png",
        "ingredients": ["tomato-sauce", "mozzarella", "cooked-ham", "mushrooms", "artichokes", "olives"],
    },
    {
        "id": "parma",
        "name": "Parma",
        "description": "Raffinement italien. Sauce tomate, mozzarella, jambon de Parme, roquette, copeaux de parmesan.",
        "base_price": 16,
        "image": "/static/pizza-parma.png",
        "ingredients": ["tomato-sauce", "mozzarella", "parma-ham", "arugula", "parmesan"],
    },
]
