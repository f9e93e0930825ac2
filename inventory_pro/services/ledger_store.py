"""
Ledger store for products, stock logs and shipments.

The store exclusively owns every collection. All mutations go through the
operations below, and each product mutation runs the post-mutation hooks
(alert derivation by default) explicitly.
"""

from datetime import date
from typing import Callable, Dict, Iterable, List, NamedTuple, Optional, Union

from ..exceptions import InsufficientStockError, InvalidPriceError, InvalidStockError
from ..models import (
    NewProduct,
    PriceChange,
    Product,
    ShipmentAction,
    ShipmentCategorySummary,
    ShipmentItem,
    ShipmentLog,
    StockAction,
    StockLog,
    SupplierChange,
    format_price,
)
from ..utils import get_logger
from .alert_service import AlertDeriver
from .report_service import shipments_by_category
from .shipment_calculator import calc_shipment, validate_percentage, validate_quantity

PostMutationHook = Callable[[List[Product]], None]

ALL = "all"


class LedgerSnapshot(NamedTuple):
    """Deep copy of the ledger collections, taken for exports."""

    products: List[Product]
    logs: List[StockLog]
    shipments: List[ShipmentItem]
    shipment_logs: List[ShipmentLog]
    categories: List[str]


def _matches(term: str, *fields: str) -> bool:
    term = term.lower()
    return any(term in field.lower() for field in fields)


class LedgerStore:
    """In-memory store for the inventory and shipment ledger."""

    def __init__(
        self,
        alert_deriver: Optional[AlertDeriver] = None,
        products: Optional[Iterable[Product]] = None,
        logs: Optional[Iterable[StockLog]] = None,
        categories: Optional[Iterable[str]] = None,
        user_name: str = "Current User",
        reject_out_of_range_percentages: bool = True,
    ) -> None:
        """
        Initialize ledger store.

        Args:
            alert_deriver: Alert deriver run after every product mutation
            products: Initial products
            logs: Initial stock logs, newest first
            categories: Initial category names
            user_name: Name recorded on log entries
            reject_out_of_range_percentages: Reject fee/GST outside 0-100
        """
        self.products: List[Product] = list(products or [])
        self.logs: List[StockLog] = list(logs or [])
        self.shipments: List[ShipmentItem] = []
        self.shipment_logs: List[ShipmentLog] = []
        self.categories: List[str] = []
        self.user_name = user_name
        self.reject_out_of_range_percentages = reject_out_of_range_percentages
        self.logger = get_logger("ledger_store")

        for category in categories or []:
            self.add_category(category)
        for product in self.products:
            self.add_category(product.category)

        self.post_mutation_hooks: List[PostMutationHook] = []
        self.alert_deriver = alert_deriver
        if alert_deriver is not None:
            self.post_mutation_hooks.append(alert_deriver.derive)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_post_mutation_hook(self, hook: PostMutationHook) -> None:
        self.post_mutation_hooks.append(hook)

    def _after_mutation(self) -> None:
        for hook in self.post_mutation_hooks:
            hook(self.products)

    def set_user(self, user_name: str) -> None:
        """Set the name recorded on subsequent log entries."""
        self.user_name = user_name

    def add_category(self, name: str) -> bool:
        """
        Register a category.

        Returns:
            True if the category was new
        """
        if name and name not in self.categories:
            self.categories.append(name)
            return True
        return False

    def add_product(self, data: Union[NewProduct, Dict]) -> Product:
        """
        Add a new product to inventory.

        Args:
            data: Product fields without id and last_updated

        Returns:
            The created Product
        """
        if not isinstance(data, NewProduct):
            data = NewProduct(**data)

        self.add_category(data.category)

        product = Product(**data.model_dump(), last_updated=date.today())
        self.products.append(product)

        self.logs.insert(0, StockLog(
            product_name=product.name,
            action=StockAction.ADD,
            quantity=product.current_stock,
            previous_stock=0,
            new_stock=product.current_stock,
            user=self.user_name,
            notes="New product added to inventory",
        ))

        self.logger.info(f"Added product: {product.name} ({product.id}) with {product.current_stock} units")
        self._after_mutation()
        return product

    def update_stock(
        self,
        product_id: str,
        new_stock: int,
        action: Union[StockAction, str],
        notes: Optional[str] = None,
        new_price: Optional[float] = None,
        new_supplier: Optional[str] = None,
    ) -> Optional[StockLog]:
        """
        Replace a product's stock level, and optionally price and supplier.

        Args:
            product_id: Product ID
            new_stock: New stock level
            action: add, remove or set
            notes: Optional notes
            new_price: Optional new unit price
            new_supplier: Optional new supplier

        Returns:
            The appended StockLog, or None if the product was not found
        """
        action = StockAction(action)
        product = self.get_product(product_id)
        if product is None:
            self.logger.warning(f"Stock update ignored, product {product_id} not found")
            return None

        if new_stock < 0:
            raise InvalidStockError(product_id=product_id, new_stock=new_stock)
        if new_price is not None and new_price < 0:
            raise InvalidPriceError(product_id=product_id, new_price=new_price)

        previous_stock = product.current_stock
        price_changed = new_price is not None and new_price != product.price
        supplier_changed = new_supplier is not None and new_supplier != product.supplier

        log_notes = notes or ""
        price_change = None
        supplier_change = None
        if price_changed:
            price_change = PriceChange(from_price=product.price, to_price=new_price)
            log_notes += (
                f"{' | ' if log_notes else ''}Price updated: "
                f"RS:{format_price(product.price)} → RS:{format_price(new_price)}"
            )
        if supplier_changed:
            supplier_change = SupplierChange(from_supplier=product.supplier, to_supplier=new_supplier)
            log_notes += f"{' | ' if log_notes else ''}Supplier updated: {product.supplier} → {new_supplier}"

        product.current_stock = new_stock
        if new_price is not None:
            product.price = new_price
        if new_supplier is not None:
            product.supplier = new_supplier
        product.last_updated = date.today()

        log = StockLog(
            product_name=product.name,
            action=action,
            quantity=abs(new_stock - previous_stock),
            previous_stock=previous_stock,
            new_stock=new_stock,
            user=self.user_name,
            notes=log_notes,
            price_change=price_change,
            supplier_change=supplier_change,
        )
        self.logs.insert(0, log)

        self.logger.info(
            f"Stock {action.value} for {product.name}: {previous_stock} -> {new_stock}"
        )
        self._after_mutation()
        return log

    def adjust_stock(
        self,
        product_id: str,
        quantity: int,
        action: Union[StockAction, str],
        notes: Optional[str] = None,
        new_price: Optional[float] = None,
        new_supplier: Optional[str] = None,
    ) -> Optional[StockLog]:
        """
        Change stock by a quantity instead of an absolute level.

        add increases stock, remove decreases it (never below zero) and set
        uses the quantity as the new level.
        """
        action = StockAction(action)
        product = self.get_product(product_id)
        if product is None:
            self.logger.warning(f"Stock adjustment ignored, product {product_id} not found")
            return None

        if action == StockAction.ADD:
            new_stock = product.current_stock + quantity
        elif action == StockAction.REMOVE:
            new_stock = max(0, product.current_stock - quantity)
        else:
            new_stock = quantity

        return self.update_stock(product_id, new_stock, action, notes, new_price, new_supplier)

    def add_to_shipment(
        self,
        product_id: str,
        quantity: int,
        fee_pct: float,
        gst_pct: float,
        notes: Optional[str] = None,
    ) -> Optional[ShipmentItem]:
        """
        Mark a quantity of a product for shipment.

        The quantity is removed from the product's stock.

        Args:
            product_id: Product ID
            quantity: Units to ship
            fee_pct: Shipping fee percentage of unit price
            gst_pct: GST percentage of unit price
            notes: Optional notes for the shipment log

        Returns:
            The created ShipmentItem, or None if the product was not found

        Raises:
            InsufficientStockError: quantity exceeds current stock
        """
        product = self.get_product(product_id)
        if product is None:
            self.logger.warning(f"Shipment ignored, product {product_id} not found")
            return None

        validate_quantity(quantity)
        if self.reject_out_of_range_percentages:
            validate_percentage("Shipping fee percentage", fee_pct)
            validate_percentage("GST percentage", gst_pct)

        if quantity > product.current_stock:
            self.logger.warning(
                f"Shipment rejected for {product.name}: requested {quantity}, "
                f"available {product.current_stock}"
            )
            raise InsufficientStockError(available=product.current_stock, requested=quantity)

        charges = calc_shipment(product.price, fee_pct, gst_pct, quantity)

        # Stock first: the shipment is only recorded once the units are taken
        self.update_stock(
            product.id,
            product.current_stock - quantity,
            StockAction.REMOVE,
            f"Marked {quantity} units for shipment",
        )

        item = ShipmentItem(
            product_id=product.id,
            product_name=product.name,
            category=product.category,
            quantity=quantity,
            price_per_unit=product.price,
            shipping_fee_percentage=fee_pct,
            shipping_fee=charges.shipping_fee,
            gst_percentage=gst_pct,
            gst_amount=charges.gst_amount,
            total_value=charges.total_value,
        )
        self.shipments.append(item)

        self.shipment_logs.insert(0, ShipmentLog(
            product_name=product.name,
            action=ShipmentAction.MARKED_FOR_SHIPMENT,
            quantity=quantity,
            stock_change=-quantity,
            user=self.user_name,
            notes=notes or f"Marked {quantity} units for shipment",
            shipping_fee=charges.shipping_fee,
            gst_amount=charges.gst_amount,
        ))

        self.logger.info(
            f"Marked {quantity} x {product.name} for shipment (total {charges.total_value:.2f})"
        )
        return item

    def remove_from_shipment(self, shipment_id: str) -> Optional[ShipmentItem]:
        """
        Remove a shipment line and return its quantity to stock.

        Args:
            shipment_id: Shipment item ID

        Returns:
            The removed ShipmentItem, or None if not found
        """
        item = self.get_shipment(shipment_id)
        if item is None:
            self.logger.warning(f"Shipment {shipment_id} not found")
            return None

        product = self.get_product(item.product_id)
        if product is not None:
            self.update_stock(
                product.id,
                product.current_stock + item.quantity,
                StockAction.ADD,
                f"Returned {item.quantity} units from shipment to inventory",
            )
        else:
            self.logger.warning(
                f"Product {item.product_id} for shipment {shipment_id} no longer exists, stock not returned"
            )

        self.shipments = [s for s in self.shipments if s.id != shipment_id]
        self.logger.info(f"Removed shipment {shipment_id} ({item.product_name})")
        return item

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def find_product_by_name(self, name: str) -> Optional[Product]:
        for product in self.products:
            if product.name == name:
                return product
        return None

    def get_shipment(self, shipment_id: str) -> Optional[ShipmentItem]:
        for item in self.shipments:
            if item.id == shipment_id:
                return item
        return None

    def filter_products(self, search: str = "", category: str = ALL) -> List[Product]:
        """
        Search products by name or category.

        Args:
            search: Case-insensitive substring of name or category
            category: Exact category, or "all"

        Returns:
            Matching products
        """
        return [
            product for product in self.products
            if _matches(search, product.name, product.category)
            and (category == ALL or product.category == category)
        ]

    def low_stock_products(self) -> List[Product]:
        return [product for product in self.products if product.is_low_stock()]

    def total_inventory_value(self) -> float:
        return sum(product.stock_value() for product in self.products)

    def filter_logs(self, search: str = "", action: str = ALL) -> List[StockLog]:
        """Filter stock logs by product/user substring and action."""
        return [
            log for log in self.logs
            if _matches(search, log.product_name, log.user)
            and (action == ALL or log.action.value == action)
        ]

    def filter_shipment_logs(self, search: str = "", action: str = ALL) -> List[ShipmentLog]:
        """Filter shipment logs by product/user substring and action."""
        return [
            log for log in self.shipment_logs
            if _matches(search, log.product_name, log.user)
            and (action == ALL or log.action.value == action)
        ]

    def filter_shipments(self, search: str = "", category: str = ALL) -> List[ShipmentItem]:
        return [
            item for item in self.shipments
            if _matches(search, item.product_name, item.category)
            and (category == ALL or item.category == category)
        ]

    def todays_logs(self, today: Optional[date] = None) -> List[StockLog]:
        today = today or date.today()
        return [log for log in self.logs if log.timestamp.date() == today]

    def todays_shipment_logs(self, today: Optional[date] = None) -> List[ShipmentLog]:
        today = today or date.today()
        return [log for log in self.shipment_logs if log.timestamp.date() == today]

    def total_shipment_value(self) -> float:
        return sum(item.total_value for item in self.shipments)

    def total_shipment_quantity(self) -> int:
        return sum(item.quantity for item in self.shipments)

    def total_shipping_fees(self) -> float:
        return sum(item.total_shipping_fee() for item in self.shipments)

    def total_gst_amount(self) -> float:
        return sum(item.total_gst() for item in self.shipments)

    def shipments_by_category(self) -> List[ShipmentCategorySummary]:
        return shipments_by_category(self.shipments)

    def dashboard_stats(self) -> Dict[str, float]:
        """
        Get headline inventory statistics.

        Returns:
            Dictionary with stats
        """
        return {
            "total_products": len(self.products),
            "low_stock_items": len(self.low_stock_products()),
            "total_value": self.total_inventory_value(),
            "categories": len(self.categories),
            "shipments": len(self.shipments),
            "activities_today": len(self.todays_logs()) + len(self.todays_shipment_logs()),
        }

    def snapshot(self) -> LedgerSnapshot:
        """Deep copy of all collections; later mutations do not affect it."""
        return LedgerSnapshot(
            products=[p.model_copy(deep=True) for p in self.products],
            logs=list(self.logs),
            shipments=[s.model_copy(deep=True) for s in self.shipments],
            shipment_logs=list(self.shipment_logs),
            categories=list(self.categories),
        )
