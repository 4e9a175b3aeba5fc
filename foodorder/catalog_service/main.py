# foodorder/catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Food Catalog (dev mock)")


FOODS = {
    "1": {"id": "1", "name": "Greek salad", "price": 12, "category": "Salad"},
    "2": {"id": "2", "name": "Chicken Rolls", "price": 20, "category": "Rolls"},
    "3": {"id": "3", "name": "Ripple Ice Cream", "price": 14, "category": "Deserts"},
    "4": {"id": "4", "name": "Pizza", "price": 10, "category": "Pasta"},
}


@app.get("/foods/{item_id}")
def get_food(item_id: str):
    food = FOODS.get(item_id)
    if not food:
        raise HTTPException(status_code=404, detail="Food not found")
    return food
