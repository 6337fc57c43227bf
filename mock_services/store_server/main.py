"""In-memory stand-in for the order store, recomputing totals server-side like the real one"""

import copy
import json
import os
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException

# Support both local development and Docker
DATA_DIR = Path("/store_stub") if os.path.exists("/store_stub") else Path(__file__).resolve().parent / "data"


def recompute(order: Dict[str, Any]) -> Dict[str, Any]:
    """Refresh paidCents and installment statuses from the payment history"""
    paid = sum(int(p["valueCents"]) for p in order.get("paymentHistory", []))
    order["paidCents"] = paid

    budget = paid
    for inst in sorted(order.get("installments", []), key=lambda i: i["number"]):
        if budget >= inst["amountCents"]:
            budget -= inst["amountCents"]
            inst["status"] = "pago"
        elif inst.get("status") == "pago":
            inst["status"] = "pendente"
    return order


def load_seed(data_dir: Path = DATA_DIR) -> List[Dict[str, Any]]:
    file = data_dir / "orders.json"
    if not file.exists():
        return []
    return json.loads(file.read_text())


def create_store_app(seed: Optional[List[Dict[str, Any]]] = None) -> FastAPI:
    """Mock store app; seed orders are copied so tests can reuse fixtures"""
    app = FastAPI(title="Mock Order Store", version="1.0.0")
    orders: Dict[str, Dict[str, Any]] = {}
    for item in copy.deepcopy(seed if seed is not None else load_seed()):
        orders[str(item["_id"])] = recompute(item)

    def find(order_id: str) -> Dict[str, Any]:
        if order_id not in orders:
            raise HTTPException(status_code=404, detail="order not found")
        return orders[order_id]

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/order/")
    def list_orders():
        return list(orders.values())

    @app.get("/order/{order_id}")
    def get_order(order_id: str):
        return find(order_id)

    @app.put("/order/{order_id}")
    def replace_order(order_id: str, body: Dict[str, Any] = Body(...)):
        order = find(order_id)
        for field in ("totalCents", "installments", "legacyDueDay"):
            if field in body:
                order[field] = body[field]
        return recompute(order)

    @app.post("/order/{order_id}/payment")
    def append_payment(order_id: str, body: Dict[str, Any] = Body(...)):
        order = find(order_id)
        if int(body.get("valueCents", 0)) <= 0:
            raise HTTPException(status_code=400, detail="valueCents must be positive")
        payment = {"id": uuid.uuid4().hex, "date": body["date"], "valueCents": int(body["valueCents"])}
        order.setdefault("paymentHistory", []).append(payment)
        recompute(order)
        return payment

    @app.delete("/order/{order_id}/payment/{payment_id}")
    def delete_payment(order_id: str, payment_id: str):
        order = find(order_id)
        history = order.get("paymentHistory", [])
        remaining = [p for p in history if p.get("id") != payment_id]
        if len(remaining) == len(history):
            raise HTTPException(status_code=404, detail="payment not found")
        order["paymentHistory"] = remaining
        return recompute(order)

    return app


app = create_store_app()
