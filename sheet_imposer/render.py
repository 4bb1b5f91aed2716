"""
PDF rendering of layout plans.
"""

# Standard Library
import dataclasses
import io
import json
import pathlib

# PIP3 modules
import PIL.Image
import pypdf
import pypdf.errors
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import sheet_imposer as si
import sheet_imposer.config
import sheet_imposer.plan


LayoutPlan = si.config.LayoutPlan
PlacementRecord = si.config.PlacementRecord
RenderResult = si.config.RenderResult

mm_to_points = si.config.mm_to_points

SIDE_FRONT = si.config.SIDE_FRONT
SIDE_BACK = si.config.SIDE_BACK
OVERSIZED_SAFE_MARGIN_MM = si.config.OVERSIZED_SAFE_MARGIN_MM
BORDER_GRAY = si.config.BORDER_GRAY
BORDER_WIDTH = si.config.BORDER_WIDTH
PLACEHOLDER_FILL_GRAY = si.config.PLACEHOLDER_FILL_GRAY
PLACEHOLDER_STROKE_GRAY = si.config.PLACEHOLDER_STROKE_GRAY
PLACEHOLDER_FONT = si.config.PLACEHOLDER_FONT
PLACEHOLDER_FONT_SIZE = si.config.PLACEHOLDER_FONT_SIZE
PROGRESS_BAR_WIDTH = si.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = si.config.PROGRESS_UPDATE_EVERY

PDF_SUFFIXES = (".pdf",)


@dataclasses.dataclass
class Artwork:
	path: str
	kind: str
	width: float
	height: float
	image_reader: reportlab.lib.utils.ImageReader | None = None
	pdf_page: pypdf.PageObject | None = None


@dataclasses.dataclass
class PdfMerge:
	page_number: int
	artwork: Artwork
	box: tuple[float, float, float, float]
	rotate: bool


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def load_artwork(path: pathlib.Path) -> Artwork | None:
	"""
	Load one artwork file.

	Raster files go through Pillow; PDF files use their first page.
	Unreadable files return None so the caller can draw a placeholder.

	Args:
		path: Artwork path.

	Returns:
		Artwork or None.
	"""
	path = pathlib.Path(path)
	if path.suffix.lower() in PDF_SUFFIXES:
		try:
			reader = pypdf.PdfReader(str(path))
			if len(reader.pages) == 0:
				print(f"Warning: {path.name} has no pages, using placeholder")
				return None
			page = reader.pages[0]
			return Artwork(
				path=str(path),
				kind="pdf",
				width=float(page.mediabox.width),
				height=float(page.mediabox.height),
				pdf_page=page,
			)
		except (OSError, pypdf.errors.PyPdfError) as error:
			print(f"Warning: failed to read {path.name} ({error}), using placeholder")
			return None
	try:
		image = PIL.Image.open(path)
		image.load()
	except (OSError, PIL.Image.DecompressionBombError) as error:
		print(f"Warning: failed to read {path.name} ({error}), using placeholder")
		return None
	width, height = image.size
	return Artwork(
		path=str(path),
		kind="image",
		width=float(width),
		height=float(height),
		image_reader=reportlab.lib.utils.ImageReader(image),
	)


#============================================
def load_artworks(paths: list[pathlib.Path]) -> list[Artwork | None]:
	return [load_artwork(path) for path in paths]


#============================================
def artwork_sizes(artworks: list[Artwork | None]) -> list[tuple[float, float] | None]:
	"""
	Extract intrinsic sizes for orientation decisions.

	Args:
		artworks: Loaded artworks, None for failures.

	Returns:
		List of (width, height) or None.
	"""
	sizes: list[tuple[float, float] | None] = []
	for artwork in artworks:
		if artwork is None:
			sizes.append(None)
		else:
			sizes.append((artwork.width, artwork.height))
	return sizes


#============================================
def compute_draw_box(plan: LayoutPlan, record: PlacementRecord) -> tuple[float, float, float, float]:
	"""
	Compute the drawn footprint of a placement in points.

	Oversized items are centered. Products that shrink oversized items
	scale them down, never up, to fit inside the sheet's safety margin;
	the others keep their full print size.

	Args:
		plan: Layout plan.
		record: Placement record.

	Returns:
		Tuple of (x, y, width, height) in points.
	"""
	layout = plan.layout
	item_width = layout.item_width_mm
	item_height = layout.item_height_mm
	if not layout.oversized:
		return (
			mm_to_points(record.x_mm),
			mm_to_points(record.y_mm),
			mm_to_points(item_width),
			mm_to_points(item_height),
		)
	sheet = layout.sheet
	scale = 1.0
	if plan.product.shrink_oversized:
		max_width = min(item_width, sheet.width_mm - 2.0 * OVERSIZED_SAFE_MARGIN_MM)
		max_height = min(item_height, sheet.height_mm - 2.0 * OVERSIZED_SAFE_MARGIN_MM)
		scale = min(max_width / item_width, max_height / item_height, 1.0)
	final_width = item_width * scale
	final_height = item_height * scale
	x = (sheet.width_mm - final_width) / 2.0
	y = (sheet.height_mm - final_height) / 2.0
	return (
		mm_to_points(x),
		mm_to_points(y),
		mm_to_points(final_width),
		mm_to_points(final_height),
	)


#============================================
def draw_raster(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image_reader: reportlab.lib.utils.ImageReader,
	box: tuple[float, float, float, float],
	rotate: bool,
) -> None:
	"""
	Draw a raster artwork filling its box, turned 90 degrees when asked.

	Args:
		pdf: ReportLab canvas.
		image_reader: ImageReader instance.
		box: (x, y, width, height) in points.
		rotate: Rotate the image 90 degrees counterclockwise.
	"""
	x, y, width, height = box
	if not rotate:
		pdf.drawImage(
			image_reader,
			x,
			y,
			width=width,
			height=height,
			mask="auto",
			preserveAspectRatio=False,
			anchor="sw",
		)
		return
	pdf.saveState()
	pdf.translate(x + width, y)
	pdf.rotate(90)
	pdf.drawImage(
		image_reader,
		0,
		0,
		width=height,
		height=width,
		mask="auto",
		preserveAspectRatio=False,
		anchor="sw",
	)
	pdf.restoreState()


#============================================
def draw_placeholder(
	pdf: reportlab.pdfgen.canvas.Canvas,
	box: tuple[float, float, float, float],
	caption: str,
) -> None:
	"""
	Draw a labeled gray placeholder for artwork that could not be loaded.

	Args:
		pdf: ReportLab canvas.
		box: (x, y, width, height) in points.
		caption: Short text drawn in the box.
	"""
	x, y, width, height = box
	pdf.saveState()
	pdf.setFillGray(PLACEHOLDER_FILL_GRAY)
	pdf.setStrokeGray(PLACEHOLDER_STROKE_GRAY)
	pdf.setLineWidth(BORDER_WIDTH)
	pdf.rect(x, y, width, height, stroke=1, fill=1)
	pdf.setFillGray(PLACEHOLDER_STROKE_GRAY)
	pdf.setFont(PLACEHOLDER_FONT, PLACEHOLDER_FONT_SIZE)
	pdf.drawCentredString(x + width / 2.0, y + height / 2.0, caption)
	pdf.restoreState()


#============================================
def draw_cut_border(pdf: reportlab.pdfgen.canvas.Canvas, box: tuple[float, float, float, float]) -> None:
	"""
	Draw a light cutting guide around an item.

	Args:
		pdf: ReportLab canvas.
		box: (x, y, width, height) in points.
	"""
	x, y, width, height = box
	pdf.setStrokeGray(BORDER_GRAY)
	pdf.setLineWidth(BORDER_WIDTH)
	pdf.rect(x, y, width, height, stroke=1, fill=0)


#============================================
def build_pdf_transform(
	page: pypdf.PageObject,
	box: tuple[float, float, float, float],
	rotate: bool,
) -> pypdf.Transformation:
	"""
	Build the transform that maps a PDF artwork page onto a box.

	Args:
		page: Artwork page.
		box: (x, y, width, height) in points.
		rotate: Rotate the page 90 degrees counterclockwise.

	Returns:
		pypdf Transformation.
	"""
	x, y, width, height = box
	left = float(page.mediabox.left)
	bottom = float(page.mediabox.bottom)
	page_width = float(page.mediabox.width)
	page_height = float(page.mediabox.height)
	transform = pypdf.Transformation().translate(-left, -bottom)
	if rotate:
		return transform.scale(height / page_width, width / page_height).rotate(90).translate(x + width, y)
	return transform.scale(width / page_width, height / page_height).translate(x, y)


#============================================
def should_draw_borders(plan: LayoutPlan) -> bool:
	product = plan.product
	if not product.draw_borders:
		return False
	if plan.layout.oversized and not product.borders_when_oversized:
		return False
	return True


#============================================
def render_plan_to_pdf(
	plan: LayoutPlan,
	front_artworks: list[Artwork | None],
	back_artworks: list[Artwork | None],
	output_path: pathlib.Path,
	verbose: bool = False,
) -> RenderResult:
	"""
	Render a layout plan to a multi-page PDF.

	All front sheets come first, then all back sheets. Raster artwork is
	drawn with ReportLab; PDF artwork is merged afterwards with pypdf,
	followed by the cutting-guide overlay so guides stay on top.

	Args:
		plan: Layout plan.
		front_artworks: Front artworks, None where loading failed.
		back_artworks: Back artworks, None where loading failed.
		output_path: Output PDF path.
		verbose: Print a progress bar.

	Returns:
		RenderResult.
	"""
	sheet = plan.layout.sheet
	page_size = (mm_to_points(sheet.width_mm), mm_to_points(sheet.height_mm))
	draw_borders = should_draw_borders(plan)

	base_buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(base_buffer, pagesize=page_size)
	overlay_buffer = io.BytesIO()
	overlay = reportlab.pdfgen.canvas.Canvas(overlay_buffer, pagesize=page_size)

	merges: list[PdfMerge] = []
	page_number = -1
	front_pages = 0
	back_pages = 0
	placed_items = 0
	placeholders = 0
	total_pages = plan.total_sheets * (2 if plan.double_sided else 1)

	sides = [(SIDE_FRONT, front_artworks)]
	if plan.double_sided:
		sides.append((SIDE_BACK, back_artworks))
	for side, artworks in sides:
		current_sheet = -1
		for record in si.plan.iter_side(plan, side):
			if record.sheet_index != current_sheet:
				if page_number >= 0:
					pdf.showPage()
					overlay.showPage()
				page_number += 1
				current_sheet = record.sheet_index
				if side == SIDE_FRONT:
					front_pages += 1
				else:
					back_pages += 1
				if verbose and (page_number % PROGRESS_UPDATE_EVERY == 0 or page_number + 1 == total_pages):
					print_progress("Sheets", page_number + 1, total_pages)
			box = compute_draw_box(plan, record)
			artwork = None
			if record.image_index < len(artworks):
				artwork = artworks[record.image_index]
			if artwork is None:
				draw_placeholder(pdf, box, f"missing {side} artwork {record.image_index + 1}")
				placeholders += 1
			elif artwork.kind == "pdf":
				merges.append(PdfMerge(page_number, artwork, box, record.rotate))
			else:
				draw_raster(pdf, artwork.image_reader, box, record.rotate)
			if draw_borders:
				draw_cut_border(overlay, box)
			placed_items += 1
	if page_number >= 0:
		# close the last page even when only pdf merges land on it
		pdf.showPage()
		overlay.showPage()
	if verbose and total_pages > 0:
		print()
	pdf.save()
	overlay.save()

	base_buffer.seek(0)
	overlay_buffer.seek(0)
	base_reader = pypdf.PdfReader(base_buffer)
	overlay_reader = pypdf.PdfReader(overlay_buffer)
	merges_by_page: dict[int, list[PdfMerge]] = {}
	for merge in merges:
		merges_by_page.setdefault(merge.page_number, []).append(merge)
	writer = pypdf.PdfWriter()
	for index, base_page in enumerate(base_reader.pages):
		writer.add_page(base_page)
		page = writer.pages[-1]
		for merge in merges_by_page.get(index, []):
			transform = build_pdf_transform(merge.artwork.pdf_page, merge.box, merge.rotate)
			page.merge_transformed_page(merge.artwork.pdf_page, transform)
		if draw_borders:
			page.merge_page(overlay_reader.pages[index])
	writer.write(str(output_path))

	return RenderResult(
		pages=front_pages + back_pages,
		front_pages=front_pages,
		back_pages=back_pages,
		placed_items=placed_items,
		placeholders=placeholders,
	)


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	plan: LayoutPlan,
	front_paths: list[pathlib.Path],
	back_paths: list[pathlib.Path],
	output_path: pathlib.Path,
	result: RenderResult,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		plan: Layout plan.
		front_paths: Front artwork paths.
		back_paths: Back artwork paths.
		output_path: Rendered PDF path.
		result: Render result.
	"""
	data = {
		"output": str(output_path),
		"front_inputs": [str(path) for path in front_paths],
		"back_inputs": [str(path) for path in back_paths],
		"layout": si.plan.describe_plan(plan),
		"pages": result.pages,
		"front_pages": result.front_pages,
		"back_pages": result.back_pages,
		"placed_items": result.placed_items,
		"placeholders": result.placeholders,
	}
	with pathlib.Path(manifest_path).open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
