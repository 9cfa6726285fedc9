# shop/tasks/reconcile.py
from shop.celery_worker import celery_app
from shop.data.database import SessionLocal
from shop.services.order_service import OrderService
from shop.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="shop.tasks.reconcile.reconcile_orders_task")
def reconcile_orders_task():
    """Sweeps orders whose stock or cart step failed after the order was saved."""
    logger.info("Reconcile orders task started")

    db = SessionLocal()
    try:
        done = OrderService(db).reconcile_pending()
        logger.info(f"Reconciled {done} orders")
        return done
    finally:
        db.close()
