import logging
from collections.abc import Iterable, Sequence
from decimal import Decimal

from exceptions.pricing import ConfigurationError
from models.cart import AlbumGroupDTO
from models.cartItem import CartItemDTO
from models.price_tier import PriceTierDTO, PricingPackageDTO, AlbumPricingResultDTO
from utils.money import to_minor_units, from_minor_units, format_money


class PricingService:
    """Service for per-album volume pricing calculations."""

    @staticmethod
    def validate_package(package: PricingPackageDTO, album_id: str | None = None) -> None:
        """
        Check the tier schedule of a pricing package.

        Raises:
            ConfigurationError: On duplicate or non-positive thresholds or negative prices
        """
        seen_thresholds = set()
        for tier in package.tiers:
            if tier.quantity_threshold <= 0:
                raise ConfigurationError(
                    f"tier threshold must be positive (got {tier.quantity_threshold})", album_id
                )
            if tier.unit_price < 0:
                raise ConfigurationError(
                    f"tier unit price must not be negative (got {tier.unit_price})", album_id
                )
            if tier.quantity_threshold in seen_thresholds:
                raise ConfigurationError(
                    f"duplicate tier threshold {tier.quantity_threshold}", album_id
                )
            seen_thresholds.add(tier.quantity_threshold)

    @staticmethod
    def resolve_tier(tiers: Sequence[PriceTierDTO], quantity: int) -> PriceTierDTO:
        """
        Find the tier that prices a selection of `quantity` photos.

        Classic tiered pricing: the tier with the highest threshold reached by
        the quantity applies to ALL photos of the selection.

        Algorithm:
        1. Sort tiers by quantity_threshold ascending
        2. Start from the smallest-threshold tier
        3. Move up while quantity_threshold <= quantity

        A quantity below every threshold therefore resolves to the
        smallest-threshold tier, never to "no tier".

        Example with tiers [1→$10, 5→$8, 10→$6]:
            - 4 photos → tier "1→$10"
            - 9 photos → tier "5→$8"
            - 10 photos → tier "10→$6" (boundary is inclusive)

        Raises:
            ConfigurationError: If tiers is empty
        """
        if not tiers:
            raise ConfigurationError("pricing package has no tiers")

        sorted_tiers = sorted(tiers, key=lambda t: t.quantity_threshold)

        applicable_tier = sorted_tiers[0]
        for tier in sorted_tiers:
            if tier.quantity_threshold <= quantity:
                applicable_tier = tier
            else:
                # Tiers are sorted ascending, so we can stop here
                break
        return applicable_tier

    @staticmethod
    def price_selection(
        quantity: int,
        package: PricingPackageDTO | None,
        flat_price: Decimal | None,
        album_id: str | None = None
    ) -> AlbumPricingResultDTO:
        """
        Price a selection of `quantity` photos from one album.

        - No photos: 0
        - Package with tiers: quantity × unit price of the active tier
        - Otherwise: the flat album price, once, however many photos are selected
          (a flat-price album sells access to the whole album)

        Raises:
            ConfigurationError: If the package is invalid, or the album has
                neither tiers nor a flat price
        """
        if quantity == 0:
            return AlbumPricingResultDTO(album_id=album_id, quantity=0, total_minor=0)

        if package is not None and package.tiers:
            PricingService.validate_package(package, album_id)
            active_tier = PricingService.resolve_tier(package.tiers, quantity)
            unit_price_minor = to_minor_units(active_tier.unit_price)
            return AlbumPricingResultDTO(
                album_id=album_id,
                quantity=quantity,
                unit_price_minor=unit_price_minor,
                total_minor=quantity * unit_price_minor,
                active_tier=active_tier
            )

        if flat_price is None:
            raise ConfigurationError("album has neither pricing tiers nor a flat price", album_id)
        if flat_price < 0:
            raise ConfigurationError(f"flat price must not be negative (got {flat_price})", album_id)

        if package is not None:
            logging.warning(f"[Pricing] Package without tiers on album {album_id}, using flat price")
        return AlbumPricingResultDTO(
            album_id=album_id,
            quantity=quantity,
            total_minor=to_minor_units(flat_price),
            is_flat_price=True
        )

    @staticmethod
    def compute_album_total_minor(
        items: Sequence[CartItemDTO],
        package: PricingPackageDTO | None,
        flat_price: Decimal | None
    ) -> int:
        """Total of one album's cart items in minor units."""
        album_id = items[0].album_id if items else None
        return PricingService.price_selection(len(items), package, flat_price, album_id).total_minor

    @staticmethod
    def compute_album_total(
        items: Sequence[CartItemDTO],
        package: PricingPackageDTO | None,
        flat_price: Decimal | None
    ) -> Decimal:
        """
        Total of one album's cart items, rounded to the currency precision.

        Args:
            items: Cart items belonging to the album
            package: Pricing package captured on the items (None for flat-price albums)
            flat_price: Whole-album price used when there are no tiers

        Returns:
            Decimal total (e.g., Decimal("40.00") for 5 photos at $8)
        """
        return from_minor_units(PricingService.compute_album_total_minor(items, package, flat_price))

    @staticmethod
    def group_by_album(items: Iterable[CartItemDTO]) -> list[AlbumGroupDTO]:
        """
        Group cart items by album, keeping albums in first-seen order.

        The group takes its album fields from the first item of the album.
        CartStore keeps one package per album: add_item() copies the package of
        the album's photos already in the cart and update_package_for_album()
        replaces it on all of them.
        """
        groups: dict[str, AlbumGroupDTO] = {}
        for item in items:
            group = groups.get(item.album_id)
            if group is None:
                group = AlbumGroupDTO(
                    album_id=item.album_id,
                    album_title=item.album_title,
                    photographer_id=item.photographer_id,
                    photographer_name=item.photographer_name,
                    pricing_package=item.pricing_package,
                    album_flat_price=item.album_flat_price,
                    items=[]
                )
                groups[item.album_id] = group
            group.items.append(item)
        return list(groups.values())

    @staticmethod
    def price_album_group(group: AlbumGroupDTO) -> AlbumPricingResultDTO:
        return PricingService.price_selection(
            len(group.items), group.pricing_package, group.album_flat_price, group.album_id
        )

    @staticmethod
    def compute_cart_total_minor(items: Iterable[CartItemDTO]) -> int:
        """Sum of all album totals in minor units; each album is priced on its own."""
        return sum(
            (PricingService.price_album_group(group).total_minor
             for group in PricingService.group_by_album(items)),
            0
        )

    @staticmethod
    def compute_cart_total(items: Iterable[CartItemDTO]) -> Decimal:
        """
        Total of the whole cart.

        Example: 3 photos from a $30 flat album and 6 photos from a tiered
        album at $5 → $30 + $30 = $60.00
        """
        return from_minor_units(PricingService.compute_cart_total_minor(items))

    @staticmethod
    def format_tier_breakdown(pricing_result: AlbumPricingResultDTO) -> str:
        """
        Format an album price for display.

        Example output:
            6 × $5.00 = $30.00
            Album access = $25.00   (flat-price albums)
        """
        if pricing_result.is_flat_price or pricing_result.unit_price_minor is None:
            return f"Album access = {format_money(pricing_result.total_minor)}"
        return (f"{pricing_result.quantity} × {format_money(pricing_result.unit_price_minor)} = "
                f"{format_money(pricing_result.total_minor)}")

    @staticmethod
    def format_available_tiers(package: PricingPackageDTO | None, unit: str = "photos") -> str | None:
        """
        Format the tiers of a package as a price list.

        Example output:
              1-4 photos: $10.00
              5-9 photos: $8.00
              10+ photos: $6.00

        Returns:
            Formatted string, or None if the package has no tiers
        """
        if package is None or not package.tiers:
            return None

        # Deduplicate by threshold (keep first occurrence)
        seen_thresholds = set()
        sorted_tiers = []
        for tier in sorted(package.tiers, key=lambda t: t.quantity_threshold):
            if tier.quantity_threshold not in seen_thresholds:
                seen_thresholds.add(tier.quantity_threshold)
                sorted_tiers.append(tier)

        lines = []
        for i, tier in enumerate(sorted_tiers):
            if i < len(sorted_tiers) - 1:
                next_threshold = sorted_tiers[i + 1].quantity_threshold
                range_str = f"{tier.quantity_threshold}-{next_threshold - 1} {unit}"
            else:
                range_str = f"{tier.quantity_threshold}+ {unit}"
            lines.append(f"{range_str:>14}: {format_money(to_minor_units(tier.unit_price))}")

        return "\n".join(lines)
