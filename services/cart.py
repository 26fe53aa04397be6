import logging
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import ValidationError

import config
from exceptions.cart import CartStorageException, InvalidCartItemException
from exceptions.pricing import ConfigurationError
from models.album import AlbumDTO, PhotoDTO
from models.cart import CartDTO, AlbumGroupDTO
from models.cartItem import CartItemDTO
from models.price_tier import PricingPackageDTO
from repositories.cart_persistence import CartPersistence
from services.pricing import PricingService
from utils.money import from_minor_units


class CartStore:
    """
    Buyer's cart of selected photos, kept in sync with a persistence backend.

    The store is owned by the application shell and injected where needed,
    there is no module-level instance. Every mutation writes the whole cart
    back to the backend. If the backend fails, the store logs the failure and
    keeps working in memory for the rest of the session.

    Usage:
        store = await CartStore.restore(RedisCartPersistence(redis), "photomarket_cart:buyer-42")
        await store.add_item(photo, album)
        total = store.total()
    """

    def __init__(self, persistence: CartPersistence, storage_key: str | None = None):
        self.persistence = persistence
        self.storage_key = storage_key or config.CART_STORAGE_KEY
        self._items: list[CartItemDTO] = []
        self._version = 0
        self._persistent = True

    @classmethod
    async def restore(cls, persistence: CartPersistence, storage_key: str | None = None) -> "CartStore":
        """Create a store and load the stored cart into it."""
        store = cls(persistence, storage_key)
        await store.load()
        return store

    @property
    def items(self) -> tuple[CartItemDTO, ...]:
        return tuple(self._items)

    @property
    def version(self) -> int:
        return self._version

    @property
    def is_persistent(self) -> bool:
        """False once a storage failure switched the store to in-memory operation."""
        return self._persistent

    async def load(self) -> None:
        """
        Replace the in-memory cart with the stored one.

        Nothing stored, malformed data and unreadable storage all result in an
        empty cart; none of them raise.
        """
        self._items = []
        self._version = 0
        try:
            serialized_cart = await self.persistence.load(self.storage_key)
        except CartStorageException as e:
            logging.error(f"[Cart] Storage unavailable, continuing in memory: {e}")
            self._persistent = False
            return

        if not serialized_cart:
            return

        try:
            cart = CartDTO.model_validate_json(serialized_cart)
        except ValidationError as e:
            logging.warning(
                f"[Cart] Discarding malformed cart under {self.storage_key}: "
                f"{e.error_count()} validation error(s)"
            )
            return

        # Stored carts written by older clients may contain duplicates
        seen_ids = set()
        for item in cart.items:
            if item.item_id not in seen_ids:
                seen_ids.add(item.item_id)
                self._items.append(item)
        self._version = cart.version
        logging.debug(f"[Cart] Restored {len(self._items)} item(s) from {self.storage_key}")

    async def _persist(self) -> None:
        self._version += 1
        if not self._persistent:
            return
        cart = CartDTO(items=self._items, version=self._version, updated_at=datetime.now(timezone.utc))
        try:
            await self.persistence.save(self.storage_key, cart.model_dump_json())
        except CartStorageException as e:
            logging.error(f"[Cart] Storage write failed, continuing in memory: {e}")
            self._persistent = False

    @staticmethod
    def build_item(photo: PhotoDTO | dict, album: AlbumDTO | dict) -> CartItemDTO:
        """
        Build the cart item for a photo of an album.

        Raises:
            InvalidCartItemException: If photo or album lack required fields
        """
        item_id = photo.get("id") if isinstance(photo, dict) else getattr(photo, "id", None)
        try:
            photo = PhotoDTO.model_validate(photo)
            album = AlbumDTO.model_validate(album)
        except ValidationError as e:
            fields = sorted({".".join(str(part) for part in error["loc"]) for error in e.errors()})
            raise InvalidCartItemException(
                f"missing or invalid fields: {', '.join(fields)}",
                item_id=str(item_id) if item_id is not None else None
            ) from e

        if not photo.id:
            raise InvalidCartItemException("photo id is empty")
        if not album.id:
            raise InvalidCartItemException("album id is empty", item_id=photo.id)

        return CartItemDTO(
            item_id=photo.id,
            album_id=album.id,
            album_title=album.title,
            photographer_id=album.photographer_id,
            photographer_name=album.photographer_name or "Photographer",
            preview_url=photo.watermarked_url,
            title=photo.title or "Photo",
            pricing_package=album.pricing_package,
            album_flat_price=album.price
        )

    async def add_item(self, photo: PhotoDTO | dict, album: AlbumDTO | dict) -> bool:
        """
        Add a photo to the cart.

        Adding a photo that is already in the cart does nothing. A photo from an
        album already in the cart takes the package of the photos there, so a
        package chosen with update_package_for_album() keeps applying to the
        whole album.

        Returns:
            True if the photo was added, False if it was already present

        Raises:
            InvalidCartItemException: If photo or album lack required fields
        """
        item = self.build_item(photo, album)
        if self.contains(item.item_id):
            return False
        album_item = next((i for i in self._items if i.album_id == item.album_id), None)
        if album_item is not None and album_item.pricing_package != item.pricing_package:
            item = item.model_copy(update={"pricing_package": album_item.pricing_package})
        self._items.append(item)
        await self._persist()
        return True

    async def remove_item(self, item_id: str) -> bool:
        """
        Remove a photo from the cart.

        Returns:
            True if the photo was removed, False if it was not in the cart
        """
        remaining = [item for item in self._items if item.item_id != item_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        await self._persist()
        return True

    async def remove_album(self, album_id: str) -> int:
        """
        Remove every photo of an album, e.g. after that album was paid.

        Returns:
            Number of removed photos
        """
        remaining = [item for item in self._items if item.album_id != album_id]
        removed = len(self._items) - len(remaining)
        if removed:
            self._items = remaining
            await self._persist()
        return removed

    async def clear(self) -> None:
        self._items = []
        await self._persist()

    def contains(self, item_id: str) -> bool:
        return any(item.item_id == item_id for item in self._items)

    def count(self) -> int:
        return len(self._items)

    async def update_package_for_album(self, album_id: str, new_package: PricingPackageDTO | dict | None) -> int:
        """
        Switch the pricing package of an album's photos already in the cart.

        Item order and identity are kept; only pricing_package changes.

        Returns:
            Number of updated items (0 if the album has no photos in the cart)

        Raises:
            ConfigurationError: If the package is malformed or its tier schedule is invalid;
                the cart and its stored copy are left unchanged
        """
        if isinstance(new_package, dict):
            try:
                new_package = PricingPackageDTO.model_validate(new_package)
            except ValidationError as e:
                raise ConfigurationError(
                    f"malformed pricing package ({e.error_count()} validation error(s))", album_id
                ) from e
        if new_package is not None:
            PricingService.validate_package(new_package, album_id)

        updated = 0
        for index, item in enumerate(self._items):
            if item.album_id == album_id:
                self._items[index] = item.model_copy(update={"pricing_package": new_package})
                updated += 1

        if updated:
            await self._persist()
        return updated

    def album_ids(self) -> list[str]:
        return list(dict.fromkeys(item.album_id for item in self._items))

    def group_by_album(self) -> list[AlbumGroupDTO]:
        return PricingService.group_by_album(self._items)

    def get_album_group(self, album_id: str) -> AlbumGroupDTO | None:
        return next((group for group in self.group_by_album() if group.album_id == album_id), None)

    def total(self) -> Decimal:
        return PricingService.compute_cart_total(self._items)

    def get_cart_summary_data(self) -> dict:
        """
        Get cart summary data without UI logic.

        Returns:
            dict with keys:
            - has_items: bool - If cart has items
            - item_count: int - Number of photos
            - albums: list[dict] - One entry per album:
                {
                    "album_id": str,
                    "album_title": str,
                    "photographer_name": str,
                    "quantity": int,
                    "total": Decimal,
                    "breakdown": str
                }
            - total: Decimal - Cart total
        """
        albums = []
        total_minor = 0
        for group in self.group_by_album():
            pricing_result = PricingService.price_album_group(group)
            total_minor += pricing_result.total_minor
            albums.append({
                "album_id": group.album_id,
                "album_title": group.album_title,
                "photographer_name": group.photographer_name,
                "quantity": len(group.items),
                "total": from_minor_units(pricing_result.total_minor),
                "breakdown": PricingService.format_tier_breakdown(pricing_result)
            })

        return {
            "has_items": bool(self._items),
            "item_count": self.count(),
            "albums": albums,
            "total": from_minor_units(total_minor)
        }
