"""Concurrent checkouts racing for the last unit of a product."""

import threading
from decimal import Decimal

import fakeredis
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from app.data.database import Base
from app.data.models import OrderModel, ProductModel
from app.domain.errors import InsufficientStock, Oversold
from app.repos.cart_repo import CartLine, CartRepo
from app.services.checkout_service import CheckoutService

BUYERS = 5


class SilentNotifier:
    def send_order_confirmation(self, order_id, customer_email, total):
        return True


def test_last_unit_sold_exactly_once(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, autoflush=False)

    with Session() as db:
        product = ProductModel(slug="last-one", name="Last one", price=Decimal("10.00"), stock=1, images=[])
        db.add(product)
        db.commit()
        product_id = product.id

    # osobny serwer fakeredis na watek, kazdy kupujacy ma wlasny koszyk
    repos = []
    for i in range(BUYERS):
        repo = CartRepo(fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True))
        repo.update_lines(f"buyer-{i}", lambda lines: [CartLine(product_id, 1)])
        repos.append(repo)

    barrier = threading.Barrier(BUYERS)
    results = []
    lock = threading.Lock()

    def buy(i):
        with Session() as db:
            svc = CheckoutService(db=db, cart_repo=repos[i], notifier=SilentNotifier())
            barrier.wait()
            try:
                order = svc.checkout(f"buyer-{i}", f"Buyer {i}", f"buyer{i}@example.com")
                outcome = ("ok", order.id)
            except (InsufficientStock, Oversold) as e:
                outcome = ("rejected", type(e).__name__)
        with lock:
            results.append(outcome)

    threads = [threading.Thread(target=buy, args=(i,)) for i in range(BUYERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == BUYERS
    assert [r[0] for r in results].count("ok") == 1

    with Session() as db:
        assert db.get(ProductModel, product_id).stock == 0
        assert db.execute(select(func.count(OrderModel.id))).scalar_one() == 1

    engine.dispose()
