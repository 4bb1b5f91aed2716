"""
CLI entry points for print sheet imposition.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import sheet_imposer as si
import sheet_imposer.config
import sheet_imposer.errors
import sheet_imposer.plan
import sheet_imposer.products
import sheet_imposer.render


PrintRequest = si.config.PrintRequest

DEFAULT_CANVAS_THICKNESS = si.config.DEFAULT_CANVAS_THICKNESS
DEFAULT_CANVAS_EXTRA = si.config.DEFAULT_CANVAS_EXTRA
SHEET_NAMES = [sheet.name for sheet in si.config.SHEET_CATALOG]


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Optional argument list, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Impose artwork onto A-series print sheets as a PDF.")
	parser.add_argument("inputs", nargs="+", help="Front artwork files (PNG, JPEG, TIFF, or PDF).")
	parser.add_argument("-b", "--back", dest="back_inputs", nargs="+", default=[], help="Back artwork files.")

	product_group = parser.add_argument_group("Product")
	product_group.add_argument(
		"-t", "--product", dest="product", choices=sorted(si.products.PRODUCTS),
		default=si.products.CUSTOM_LAYOUT.key, help="Product type.",
	)
	product_group.add_argument("-W", "--width", dest="width", type=float, default=None, help="Item width in mm.")
	product_group.add_argument("-H", "--height", dest="height", type=float, default=None, help="Item height in mm.")
	product_group.add_argument(
		"--canvas-preset", dest="canvas_preset", choices=sorted(si.products.CANVAS_PRESETS),
		default=None, help="Canvas wrap preset size.",
	)
	product_group.add_argument(
		"--thickness", dest="thickness", type=float, default=DEFAULT_CANVAS_THICKNESS,
		help="Canvas stretcher depth in mm.",
	)
	product_group.add_argument(
		"--extra", dest="extra", type=float, default=DEFAULT_CANVAS_EXTRA,
		help="Canvas fold allowance in mm.",
	)
	product_group.add_argument(
		"--no-match-orientation", dest="match_orientation", action="store_false",
		help="Keep canvas orientation even when the artwork orientation differs.",
	)

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-s", "--sheet-size", dest="sheet_name", type=str.upper, choices=SHEET_NAMES, default=None, help="Fixed sheet size; auto when omitted.")
	layout_group.add_argument("-q", "--quantity", dest="quantity", type=int, default=None, help="Number of items.")
	layout_group.add_argument("-n", "--sheets", dest="sheets", type=int, default=None, help="Number of full sheets.")
	layout_group.add_argument("-d", "--double-sided", dest="double_sided", action="store_true", help="Add mirrored back sheets.")
	layout_group.add_argument("-e", "--efficiency-threshold", dest="efficiency_threshold", type=float, default=None, help="Minimum area use for auto sheet selection.")
	layout_group.add_argument("--spacing", dest="spacing", type=float, default=None, help="Gap between items in mm.")
	layout_group.add_argument("--bleed", dest="bleed", type=float, default=None, help="Bleed added to each item edge in mm.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	output_group.add_argument("--plan-only", dest="plan_only", action="store_true", help="Print the layout plan without rendering.")

	parser.set_defaults(match_orientation=True, double_sided=False, plan_only=False)
	args = parser.parse_args(argv)
	if args.quantity is not None and args.sheets is not None:
		parser.error("use either --quantity or --sheets, not both")
	return args


#============================================
def build_request(args: argparse.Namespace) -> PrintRequest:
	"""
	Build a print request from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PrintRequest.
	"""
	product = si.products.get_product(args.product)
	width = args.width
	height = args.height
	bleed = args.bleed
	if product.key == si.products.CANVAS_WRAP.key:
		if args.canvas_preset is not None:
			preset = si.products.CANVAS_PRESETS[args.canvas_preset]
			width = preset.width_mm
			height = preset.height_mm
		if bleed is None:
			bleed = si.products.canvas_wrap_bleed(args.thickness, args.extra)
	return PrintRequest(
		product=product,
		width_mm=width,
		height_mm=height,
		front_count=len(args.inputs),
		back_count=len(args.back_inputs),
		quantity=args.quantity,
		sheets=args.sheets,
		sheet_name=args.sheet_name,
		double_sided=args.double_sided,
		bleed_mm=bleed,
		spacing_mm=args.spacing,
		efficiency_threshold=args.efficiency_threshold,
		match_orientation=args.match_orientation,
	)


#============================================
def print_plan(plan: si.config.LayoutPlan) -> None:
	"""
	Print a layout plan summary.

	Args:
		plan: Layout plan.
	"""
	summary = si.plan.describe_plan(plan)
	print(f"Product: {summary['product']}")
	print(f"Item: {summary['item_width_mm']:g}x{summary['item_height_mm']:g}mm (bleed {summary['bleed_mm']:g}mm, spacing {summary['spacing_mm']:g}mm)")
	print(f"Sheet: {summary['sheet']} ({summary['sheet_width_mm']:g}x{summary['sheet_height_mm']:g}mm)")
	if summary["oversized"]:
		print("Grid: oversized, 1 item per sheet")
	else:
		print(f"Grid: {summary['cols']}x{summary['rows']} ({summary['items_per_sheet']} per sheet)")
	print(f"Margins: {summary['margin_horizontal_mm']:g}mm x {summary['margin_vertical_mm']:g}mm")
	print(f"Efficiency: {summary['efficiency_percent']}%")
	print(f"Quantity: {summary['quantity']}")
	print(f"Sheets per side: {summary['total_sheets']}")
	print(f"Double sided: {summary['double_sided']}")


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the pipeline from artwork files to an imposed PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	start_time = time.perf_counter()
	front_paths = [pathlib.Path(path) for path in args.inputs]
	back_paths = [pathlib.Path(path) for path in args.back_inputs]
	print("Print sheet imposition")
	print(f"Front artwork files: {len(front_paths)}")
	if back_paths:
		print(f"Back artwork files: {len(back_paths)}")

	load_start = time.perf_counter()
	front_artworks = si.render.load_artworks(front_paths)
	back_artworks = si.render.load_artworks(back_paths) if args.double_sided else []
	load_end = time.perf_counter()
	if front_artworks and all(artwork is None for artwork in front_artworks):
		raise si.errors.MissingArtworkError("None of the front artwork files could be read")
	if back_artworks and all(artwork is None for artwork in back_artworks):
		raise si.errors.MissingArtworkError("None of the back artwork files could be read")

	request = build_request(args)
	plan = si.plan.build_plan(
		request,
		si.render.artwork_sizes(front_artworks),
		si.render.artwork_sizes(back_artworks),
	)
	print_plan(plan)
	if plan.layout.oversized:
		print("Warning: item does not fit the sheet, printing one centered item per sheet")
	if args.plan_only:
		return

	output_path = args.output_path
	if output_path is None:
		output_path = si.products.make_output_filename(
			plan.product,
			plan.item,
			plan.layout,
			plan.total_sheets,
			plan.double_sided,
		)
	output_path = pathlib.Path(output_path)
	print(f"Output PDF: {output_path}")

	render_start = time.perf_counter()
	result = si.render.render_plan_to_pdf(plan, front_artworks, back_artworks, output_path, verbose=True)
	render_end = time.perf_counter()
	print(f"Pages written: {result.pages}")
	print(f"Items placed: {result.placed_items}")
	if result.placeholders > 0:
		print(f"Placeholders drawn: {result.placeholders}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	si.render.write_manifest(
		pathlib.Path(manifest_path),
		plan,
		front_paths,
		back_paths if plan.double_sided else [],
		output_path,
		result,
	)
	print(f"Manifest written: {manifest_path}")

	total_time = time.perf_counter() - start_time
	print(
		"Timing: load={:.2f}s render={:.2f}s total={:.2f}s".format(
			load_end - load_start,
			render_end - render_start,
			total_time,
		)
	)


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except si.errors.LayoutError as error:
		print(f"Error: {error}")
		raise SystemExit(2)
