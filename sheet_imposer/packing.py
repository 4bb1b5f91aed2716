"""
Grid packing and sheet selection.
"""

# Standard Library
import functools

# local repo modules
import sheet_imposer as si
import sheet_imposer.config
import sheet_imposer.errors


SheetSize = si.config.SheetSize
ItemSpec = si.config.ItemSpec
GridLayout = si.config.GridLayout
SheetSelection = si.config.SheetSelection

SHEET_CATALOG = si.config.SHEET_CATALOG
MAX_QUANTITY = si.config.MAX_QUANTITY


#============================================
def compute_max_count(sheet_length: float, item_length: float, spacing: float) -> int:
	"""
	Compute how many items fit along one sheet axis.

	Args:
		sheet_length: Sheet length in mm.
		item_length: Item footprint length in mm.
		spacing: Gap between items in mm.

	Returns:
		Upper bound on items along the axis.
	"""
	return int((sheet_length + spacing) // (item_length + spacing))


#============================================
def compute_occupied(count: int, item_length: float, spacing: float) -> float:
	"""
	Compute the length used by a run of items including the gaps between them.

	Args:
		count: Number of items.
		item_length: Item footprint length in mm.
		spacing: Gap between items in mm.

	Returns:
		Occupied length in mm.
	"""
	return count * item_length + (count - 1) * spacing


#============================================
def build_oversized_layout(item: ItemSpec, sheet: SheetSize) -> GridLayout:
	"""
	Build the single-item centered layout for items that cannot be tiled.

	Args:
		item: Item spec.
		sheet: Sheet size.

	Returns:
		Oversized GridLayout.
	"""
	item_width = item.effective_width_mm
	item_height = item.effective_height_mm
	return GridLayout(
		cols=1,
		rows=1,
		items_per_sheet=1,
		margin_horizontal_mm=max(0.0, (sheet.width_mm - item_width) / 2.0),
		margin_vertical_mm=max(0.0, (sheet.height_mm - item_height) / 2.0),
		sheet=sheet,
		item_width_mm=item_width,
		item_height_mm=item_height,
		spacing_mm=item.spacing_mm,
		oversized=True,
	)


#============================================
@functools.lru_cache(maxsize=256)
def pack_grid(item: ItemSpec, sheet: SheetSize) -> GridLayout:
	"""
	Find the column by row grid that fits the most items on a sheet.

	The search is exhaustive over every (cols, rows) pair up to the
	per-axis bound, so the maximum is exact. Ties keep the first pair
	found. Items that cannot be tiled get the oversized fallback.

	Args:
		item: Item spec, bleed included in its effective footprint.
		sheet: Sheet size.

	Returns:
		GridLayout centered on the sheet.
	"""
	item_width = item.effective_width_mm
	item_height = item.effective_height_mm
	spacing = item.spacing_mm
	if item_width > sheet.width_mm or item_height > sheet.height_mm:
		return build_oversized_layout(item, sheet)

	max_cols = compute_max_count(sheet.width_mm, item_width, spacing)
	max_rows = compute_max_count(sheet.height_mm, item_height, spacing)

	best: tuple[int, int, float, float] | None = None
	best_count = 0
	for cols in range(1, max_cols + 1):
		total_width = compute_occupied(cols, item_width, spacing)
		if total_width > sheet.width_mm:
			continue
		for rows in range(1, max_rows + 1):
			total_height = compute_occupied(rows, item_height, spacing)
			if total_height > sheet.height_mm:
				continue
			if cols * rows > best_count:
				best_count = cols * rows
				best = (cols, rows, total_width, total_height)

	if best is None:
		return build_oversized_layout(item, sheet)

	cols, rows, total_width, total_height = best
	return GridLayout(
		cols=cols,
		rows=rows,
		items_per_sheet=cols * rows,
		margin_horizontal_mm=(sheet.width_mm - total_width) / 2.0,
		margin_vertical_mm=(sheet.height_mm - total_height) / 2.0,
		sheet=sheet,
		item_width_mm=item_width,
		item_height_mm=item_height,
		spacing_mm=spacing,
		oversized=False,
	)


#============================================
def compute_efficiency(layout: GridLayout) -> float:
	"""
	Compute the fraction of sheet area covered by packed items.

	Args:
		layout: Packed layout.

	Returns:
		Area utilization, 0.0 for oversized layouts.
	"""
	if layout.oversized:
		return 0.0
	sheet_area = layout.sheet.width_mm * layout.sheet.height_mm
	item_area = layout.item_width_mm * layout.item_height_mm
	return (layout.items_per_sheet * item_area) / sheet_area


#============================================
def compute_total_sheets(layout: GridLayout, quantity: int) -> int:
	"""
	Compute how many sheets a quantity needs.

	Args:
		layout: Packed layout.
		quantity: Number of items.

	Returns:
		Sheet count, partial final sheet included.
	"""
	per_sheet = layout.items_per_sheet
	return (quantity + per_sheet - 1) // per_sheet


#============================================
def orient_sheet(sheet: SheetSize, landscape: bool) -> SheetSize:
	"""
	Turn a sheet to landscape or portrait, keeping its name.

	Args:
		sheet: Sheet size.
		landscape: True for the long edge horizontal.

	Returns:
		Oriented SheetSize.
	"""
	short_side = min(sheet.width_mm, sheet.height_mm)
	long_side = max(sheet.width_mm, sheet.height_mm)
	if landscape:
		return SheetSize(sheet.name, long_side, short_side)
	return SheetSize(sheet.name, short_side, long_side)


#============================================
def select_best_sheet(
	item: ItemSpec,
	catalog: tuple[SheetSize, ...],
	quantity: int,
	efficiency_threshold: float,
) -> SheetSelection:
	"""
	Pick the smallest sheet whose packing efficiency clears a threshold.

	Falls through to the last (largest) catalog entry, so any positive
	item size gets a result, oversized if need be.

	Args:
		item: Item spec.
		catalog: Sheet sizes ordered smallest to largest.
		quantity: Requested quantity.
		efficiency_threshold: Minimum efficiency to accept a sheet.

	Returns:
		SheetSelection.
	"""
	if not catalog:
		raise si.errors.UnknownSheetSizeError("Sheet catalog is empty")
	selection = None
	for index, sheet in enumerate(catalog):
		layout = pack_grid(item, sheet)
		efficiency = compute_efficiency(layout)
		selection = SheetSelection(layout=layout, sheet=sheet, efficiency=efficiency)
		if efficiency > efficiency_threshold or index == len(catalog) - 1:
			break
	return selection


#============================================
def resolve_catalog(names: tuple[str, ...]) -> tuple[SheetSize, ...]:
	"""
	Look up catalog entries by name, keeping the smallest-first order.

	Args:
		names: Sheet names.

	Returns:
		Tuple of SheetSize entries.
	"""
	wanted = {name.upper() for name in names}
	return tuple(sheet for sheet in SHEET_CATALOG if sheet.name in wanted)


#============================================
def get_sheet_size(name: str, catalog: tuple[SheetSize, ...] = SHEET_CATALOG) -> SheetSize:
	"""
	Find a sheet by name.

	Args:
		name: Sheet name like "A3", case insensitive.
		catalog: Allowed sheets.

	Returns:
		SheetSize.
	"""
	normalized = (name or "").strip().upper()
	for sheet in catalog:
		if sheet.name == normalized:
			return sheet
	allowed = ", ".join(sheet.name for sheet in catalog)
	raise si.errors.UnknownSheetSizeError(f"Unknown sheet size {name!r} (allowed: {allowed})")


#============================================
def validate_item_dimensions(
	width_mm: float,
	height_mm: float,
	min_mm: float,
	max_mm: float,
) -> None:
	"""
	Check item dimensions against a product's accepted range.

	Args:
		width_mm: Item width.
		height_mm: Item height.
		min_mm: Smallest accepted side.
		max_mm: Largest accepted side.
	"""
	for axis, value in (("width", width_mm), ("height", height_mm)):
		if value is None or not value > 0:
			raise si.errors.InvalidDimensionError(f"Item {axis} must be positive, got {value}")
		if value < min_mm or value > max_mm:
			raise si.errors.InvalidDimensionError(
				f"Item {axis} {value:g}mm outside {min_mm:g}-{max_mm:g}mm"
			)


#============================================
def validate_spacing_and_bleed(
	width_mm: float,
	height_mm: float,
	spacing_mm: float,
	bleed_mm: float,
) -> None:
	"""
	Check that spacing and bleed are non-negative and leave a real footprint.

	Args:
		width_mm: Item width.
		height_mm: Item height.
		spacing_mm: Gap between items.
		bleed_mm: Bleed added to each item edge.
	"""
	if spacing_mm is None or spacing_mm < 0:
		raise si.errors.InvalidDimensionError(f"Spacing must be zero or more, got {spacing_mm}")
	if bleed_mm is None or bleed_mm < 0:
		raise si.errors.InvalidDimensionError(f"Bleed must be zero or more, got {bleed_mm}")
	for axis, value in (("width", width_mm), ("height", height_mm)):
		if value + 2.0 * bleed_mm <= 0:
			raise si.errors.InvalidDimensionError(f"Item {axis} with bleed must be positive")


#============================================
def validate_quantity(quantity: int, ceiling: int = MAX_QUANTITY, name: str = "quantity") -> None:
	"""
	Check a quantity or sheet count against the configured ceiling.

	Args:
		quantity: Requested count.
		ceiling: Largest accepted count.
		name: Name used in the error message.
	"""
	if isinstance(quantity, bool) or not isinstance(quantity, int):
		raise si.errors.InvalidQuantityError(f"Invalid {name}: {quantity!r}")
	if quantity < 1 or quantity > ceiling:
		raise si.errors.InvalidQuantityError(f"Invalid {name} {quantity} (1-{ceiling})")
