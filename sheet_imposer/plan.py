"""
Request validation and layout planning.
"""

# Standard Library
import collections.abc

# local repo modules
import sheet_imposer as si
import sheet_imposer.config
import sheet_imposer.errors
import sheet_imposer.packing
import sheet_imposer.placement
import sheet_imposer.products


PrintRequest = si.config.PrintRequest
LayoutPlan = si.config.LayoutPlan
PlacementRecord = si.config.PlacementRecord

MAX_QUANTITY = si.config.MAX_QUANTITY
SIDE_FRONT = si.config.SIDE_FRONT
SIDE_BACK = si.config.SIDE_BACK


#============================================
def validate_request(request: PrintRequest) -> None:
	"""
	Validate a print request before any packing.

	Args:
		request: Print request.
	"""
	if request.front_count <= 0:
		raise si.errors.MissingArtworkError("No front artwork provided")
	if request.double_sided and request.back_count <= 0:
		raise si.errors.MissingArtworkError("Back artwork required for double-sided printing")
	product = request.product
	width = request.width_mm
	height = request.height_mm
	if product.fixed_width_mm is not None:
		width = product.fixed_width_mm
	if product.fixed_height_mm is not None:
		height = product.fixed_height_mm
	si.packing.validate_item_dimensions(width, height, product.min_item_mm, product.max_item_mm)
	spacing = request.spacing_mm if request.spacing_mm is not None else product.spacing_mm
	bleed = request.bleed_mm if request.bleed_mm is not None else product.bleed_mm
	si.packing.validate_spacing_and_bleed(width, height, spacing, bleed)
	if request.quantity is not None:
		si.packing.validate_quantity(request.quantity, MAX_QUANTITY)
	if request.sheets is not None:
		si.packing.validate_quantity(request.sheets, MAX_QUANTITY, name="sheet count")


#============================================
def build_plan(
	request: PrintRequest,
	front_sizes: list[tuple[float, float] | None] | None = None,
	back_sizes: list[tuple[float, float] | None] | None = None,
) -> LayoutPlan:
	"""
	Validate a request and compute its layout plan.

	Args:
		request: Print request.
		front_sizes: Intrinsic (width, height) per front artwork, None when unknown.
		back_sizes: Intrinsic (width, height) per back artwork.

	Returns:
		LayoutPlan.
	"""
	validate_request(request)
	product = request.product
	if front_sizes is None:
		front_sizes = [None] * request.front_count
	if back_sizes is None:
		back_sizes = [None] * request.back_count

	width = request.width_mm
	height = request.height_mm
	if product.match_sheet_orientation and request.match_orientation and front_sizes:
		width, height = si.products.match_canvas_orientation(width, height, front_sizes[0])

	item = si.products.build_item_spec(
		product,
		width,
		height,
		bleed_mm=request.bleed_mm,
		spacing_mm=request.spacing_mm,
	)

	catalog = si.packing.resolve_catalog(product.sheet_names)
	if product.match_sheet_orientation:
		landscape = item.effective_width_mm > item.effective_height_mm
		catalog = tuple(si.packing.orient_sheet(sheet, landscape) for sheet in catalog)

	threshold = request.efficiency_threshold
	if threshold is None:
		threshold = product.efficiency_threshold

	if request.sheet_name:
		sheet = si.packing.get_sheet_size(request.sheet_name, catalog)
		layout = si.packing.pack_grid(item, sheet)
		efficiency = si.packing.compute_efficiency(layout)
	else:
		selection = si.packing.select_best_sheet(item, catalog, request.quantity or 1, threshold)
		layout = selection.layout
		efficiency = selection.efficiency

	if request.sheets is not None:
		quantity = request.sheets * layout.items_per_sheet
		si.packing.validate_quantity(quantity, MAX_QUANTITY)
	elif request.quantity is not None:
		quantity = request.quantity
	else:
		quantity = si.products.suggest_quantity(product, request.front_count, layout.items_per_sheet)
	total_sheets = si.packing.compute_total_sheets(layout, quantity)

	item_width = item.effective_width_mm
	item_height = item.effective_height_mm
	front_rotations = si.placement.compute_rotations(
		front_sizes, item_width, item_height, enabled=product.auto_rotate,
	)
	back_rotations = si.placement.compute_rotations(
		back_sizes, item_width, item_height, enabled=product.auto_rotate,
	)

	return LayoutPlan(
		product=product,
		item=item,
		layout=layout,
		efficiency=efficiency,
		quantity=quantity,
		total_sheets=total_sheets,
		double_sided=request.double_sided,
		front_rotations=front_rotations,
		back_rotations=back_rotations,
		front_count=request.front_count,
		back_count=request.back_count if request.double_sided else 0,
	)


#============================================
def iter_side(plan: LayoutPlan, side: str) -> collections.abc.Iterator[PlacementRecord]:
	"""
	Iterate the placements for one side of a plan.

	Args:
		plan: Layout plan.
		side: SIDE_FRONT or SIDE_BACK.

	Returns:
		Iterator of PlacementRecord entries, empty for a missing back side.
	"""
	if side == SIDE_BACK:
		if not plan.double_sided:
			return iter(())
		return si.placement.sequence_placements(
			plan.layout, plan.quantity, plan.back_count, SIDE_BACK, plan.back_rotations,
		)
	return si.placement.sequence_placements(
		plan.layout, plan.quantity, plan.front_count, SIDE_FRONT, plan.front_rotations,
	)


#============================================
def describe_plan(plan: LayoutPlan) -> dict:
	"""
	Summarize a plan as plain JSON-ready data.

	Args:
		plan: Layout plan.

	Returns:
		Dict of layout facts.
	"""
	layout = plan.layout
	return {
		"product": plan.product.key,
		"item_width_mm": plan.item.width_mm,
		"item_height_mm": plan.item.height_mm,
		"bleed_mm": plan.item.bleed_mm,
		"spacing_mm": plan.item.spacing_mm,
		"sheet": layout.sheet.name,
		"sheet_width_mm": layout.sheet.width_mm,
		"sheet_height_mm": layout.sheet.height_mm,
		"cols": layout.cols,
		"rows": layout.rows,
		"items_per_sheet": layout.items_per_sheet,
		"margin_horizontal_mm": round(layout.margin_horizontal_mm, 3),
		"margin_vertical_mm": round(layout.margin_vertical_mm, 3),
		"oversized": layout.oversized,
		"efficiency_percent": round(plan.efficiency * 100.0, 1),
		"quantity": plan.quantity,
		"total_sheets": plan.total_sheets,
		"double_sided": plan.double_sided,
	}
