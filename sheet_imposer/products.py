"""
Product policies, canvas presets, and output naming.
"""

# local repo modules
import sheet_imposer as si
import sheet_imposer.config


ProductPolicy = si.config.ProductPolicy
CanvasPreset = si.config.CanvasPreset
ItemSpec = si.config.ItemSpec
GridLayout = si.config.GridLayout

DEFAULT_SPACING_MM = si.config.DEFAULT_SPACING_MM
DEFAULT_EFFICIENCY_THRESHOLD = si.config.DEFAULT_EFFICIENCY_THRESHOLD
MIN_ITEM_MM = si.config.MIN_ITEM_MM
MAX_ITEM_MM = si.config.MAX_ITEM_MM
DEFAULT_CANVAS_THICKNESS = si.config.DEFAULT_CANVAS_THICKNESS
DEFAULT_CANVAS_EXTRA = si.config.DEFAULT_CANVAS_EXTRA


BUSINESS_CARD = ProductPolicy(
	key="business-card",
	label="business-cards",
	bleed_mm=0.0,
	spacing_mm=DEFAULT_SPACING_MM,
	sheet_names=("A4", "A3"),
	efficiency_threshold=DEFAULT_EFFICIENCY_THRESHOLD,
	fixed_width_mm=si.config.BUSINESS_CARD_WIDTH,
	fixed_height_mm=si.config.BUSINESS_CARD_HEIGHT,
	min_item_mm=MIN_ITEM_MM,
	max_item_mm=MAX_ITEM_MM,
	auto_rotate=False,
	match_sheet_orientation=False,
	draw_borders=True,
	borders_when_oversized=True,
	fill_last_sheet=True,
	shrink_oversized=True,
)

CUSTOM_LAYOUT = ProductPolicy(
	key="custom",
	label="custom-layout",
	bleed_mm=0.0,
	spacing_mm=DEFAULT_SPACING_MM,
	sheet_names=("A4", "A3", "A2", "A1", "A0"),
	efficiency_threshold=DEFAULT_EFFICIENCY_THRESHOLD,
	fixed_width_mm=None,
	fixed_height_mm=None,
	min_item_mm=MIN_ITEM_MM,
	max_item_mm=MAX_ITEM_MM,
	auto_rotate=True,
	match_sheet_orientation=False,
	draw_borders=True,
	borders_when_oversized=False,
	fill_last_sheet=True,
	shrink_oversized=True,
)

# canvas bleed is per request: thickness plus the fold allowance
CANVAS_WRAP = ProductPolicy(
	key="canvas-wrap",
	label="canvas-wrap",
	bleed_mm=DEFAULT_CANVAS_THICKNESS + DEFAULT_CANVAS_EXTRA,
	spacing_mm=DEFAULT_SPACING_MM,
	sheet_names=("A4", "A3", "A2", "A1", "A0"),
	efficiency_threshold=DEFAULT_EFFICIENCY_THRESHOLD,
	fixed_width_mm=None,
	fixed_height_mm=None,
	min_item_mm=MIN_ITEM_MM,
	max_item_mm=MAX_ITEM_MM,
	auto_rotate=False,
	match_sheet_orientation=True,
	draw_borders=False,
	borders_when_oversized=False,
	fill_last_sheet=False,
	shrink_oversized=False,
)

PRODUCTS = {
	BUSINESS_CARD.key: BUSINESS_CARD,
	CUSTOM_LAYOUT.key: CUSTOM_LAYOUT,
	CANVAS_WRAP.key: CANVAS_WRAP,
}

CANVAS_PRESETS = {
	"A4": CanvasPreset("A4", "A4 Canvas (300x200mm)", 300.0, 200.0),
	"A3": CanvasPreset("A3", "A3 Canvas (400x300mm)", 400.0, 300.0),
	"A2": CanvasPreset("A2", "A2 Canvas (600x400mm)", 600.0, 400.0),
	"A1": CanvasPreset("A1", "A1 Canvas (800x600mm)", 800.0, 600.0),
	"A0": CanvasPreset("A0", "A0 Canvas (1200x800mm)", 1200.0, 800.0),
	"SQUARE": CanvasPreset("SQUARE", "Square Canvas (300x300mm)", 300.0, 300.0),
}


#============================================
def get_product(key: str) -> ProductPolicy:
	"""
	Look up a product policy by key.

	Args:
		key: Product key like "business-card".

	Returns:
		ProductPolicy.
	"""
	if key not in PRODUCTS:
		allowed = ", ".join(sorted(PRODUCTS))
		raise KeyError(f"Unknown product {key!r} (allowed: {allowed})")
	return PRODUCTS[key]


#============================================
def canvas_wrap_bleed(thickness_mm: float, extra_mm: float) -> float:
	"""
	Compute the wrap allowance added to each canvas edge.

	Args:
		thickness_mm: Stretcher bar depth.
		extra_mm: Extra allowance for the fold around the back.

	Returns:
		Bleed in mm.
	"""
	return thickness_mm + extra_mm


#============================================
def match_canvas_orientation(
	width_mm: float,
	height_mm: float,
	image_size: tuple[float, float] | None,
) -> tuple[float, float]:
	"""
	Swap canvas sides when the artwork orientation differs.

	Args:
		width_mm: Canvas width.
		height_mm: Canvas height.
		image_size: (width, height) of the first artwork, or None.

	Returns:
		Tuple of (width_mm, height_mm).
	"""
	if image_size is None:
		return (width_mm, height_mm)
	canvas_landscape = width_mm > height_mm
	image_landscape = image_size[0] > image_size[1]
	if canvas_landscape != image_landscape:
		return (height_mm, width_mm)
	return (width_mm, height_mm)


#============================================
def build_item_spec(
	product: ProductPolicy,
	width_mm: float,
	height_mm: float,
	bleed_mm: float | None = None,
	spacing_mm: float | None = None,
) -> ItemSpec:
	"""
	Build the item spec for a product, applying fixed sizes and overrides.
	"""
	if product.fixed_width_mm is not None:
		width_mm = product.fixed_width_mm
	if product.fixed_height_mm is not None:
		height_mm = product.fixed_height_mm
	if bleed_mm is None:
		bleed_mm = product.bleed_mm
	if spacing_mm is None:
		spacing_mm = product.spacing_mm
	return ItemSpec(
		width_mm=width_mm,
		height_mm=height_mm,
		spacing_mm=spacing_mm,
		bleed_mm=bleed_mm,
	)


#============================================
def suggest_quantity(product: ProductPolicy, image_count: int, items_per_sheet: int) -> int:
	"""
	Suggest a quantity when none was requested.

	Products that fill the last sheet round up to whole sheets; others
	print one item per artwork.

	Args:
		product: Product policy.
		image_count: Number of front artworks.
		items_per_sheet: Sheet capacity.

	Returns:
		Suggested quantity.
	"""
	count = max(1, image_count)
	if not product.fill_last_sheet:
		return count
	full_sheets = (count + items_per_sheet - 1) // items_per_sheet
	return max(count, full_sheets * items_per_sheet)


#============================================
def format_mm(value: float) -> str:
	return f"{value:g}"


#============================================
def make_output_filename(
	product: ProductPolicy,
	item: ItemSpec,
	layout: GridLayout,
	total_sheets: int,
	double_sided: bool,
) -> str:
	"""
	Build a descriptive PDF filename.

	Args:
		product: Product policy.
		item: Item spec (nominal size is used).
		layout: Packed layout.
		total_sheets: Sheet count per side.
		double_sided: Whether back sheets are included.

	Returns:
		Filename like "custom-layout-100x50mm-A4-3sheets.pdf".
	"""
	dims = f"{format_mm(item.width_mm)}x{format_mm(item.height_mm)}mm"
	name = f"{product.label}-{dims}-{layout.sheet.name}-{total_sheets}sheets"
	if double_sided:
		name += "-doublesided"
	return name + ".pdf"
