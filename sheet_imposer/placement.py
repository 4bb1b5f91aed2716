"""
Item orientation and per-item placement sequencing.
"""

# Standard Library
import collections.abc

# local repo modules
import sheet_imposer as si
import sheet_imposer.config


GridLayout = si.config.GridLayout
PlacementRecord = si.config.PlacementRecord

SIDE_FRONT = si.config.SIDE_FRONT
SIDE_BACK = si.config.SIDE_BACK


#============================================
def decide_rotation(
	image_width: float,
	image_height: float,
	item_width_mm: float,
	item_height_mm: float,
) -> bool:
	"""
	Decide whether turning an image 90 degrees better matches the item shape.

	Args:
		image_width: Image width in any unit.
		image_height: Image height in the same unit.
		item_width_mm: Item width.
		item_height_mm: Item height.

	Returns:
		True when the rotated aspect ratio is strictly closer.
	"""
	item_aspect = item_width_mm / item_height_mm
	image_aspect = image_width / image_height
	landscape_diff = abs(image_aspect - item_aspect)
	portrait_diff = abs((1.0 / image_aspect) - item_aspect)
	return portrait_diff < landscape_diff


#============================================
def compute_rotations(
	image_sizes: list[tuple[float, float] | None],
	item_width_mm: float,
	item_height_mm: float,
	enabled: bool = True,
) -> list[bool]:
	"""
	Compute the rotate flag for each artwork.

	Args:
		image_sizes: (width, height) per artwork, None when unknown.
		item_width_mm: Item width.
		item_height_mm: Item height.
		enabled: False to never rotate.

	Returns:
		List of rotate flags aligned with image_sizes.
	"""
	rotations: list[bool] = []
	for size in image_sizes:
		if not enabled or size is None or size[0] <= 0 or size[1] <= 0:
			rotations.append(False)
			continue
		rotations.append(decide_rotation(size[0], size[1], item_width_mm, item_height_mm))
	return rotations


#============================================
def mirror_column(col: int, cols: int) -> int:
	"""
	Mirror a column index so a back side lines up after a flip on the vertical axis.
	"""
	return cols - 1 - col


#============================================
def compute_slot_position(layout: GridLayout, row: int, col: int) -> tuple[float, float]:
	"""
	Compute the lower-left corner of a grid slot.

	Row 0 is the visual top of the sheet, so y counts down from the
	top edge in a bottom-left origin space.

	Args:
		layout: Packed layout.
		row: Row index.
		col: Column index.

	Returns:
		Tuple of (x_mm, y_mm).
	"""
	if layout.oversized:
		x = max(0.0, (layout.sheet.width_mm - layout.item_width_mm) / 2.0)
		y = max(0.0, (layout.sheet.height_mm - layout.item_height_mm) / 2.0)
		return (x, y)
	x = layout.margin_horizontal_mm + col * (layout.item_width_mm + layout.spacing_mm)
	y = (
		layout.sheet.height_mm
		- layout.margin_vertical_mm
		- row * (layout.item_height_mm + layout.spacing_mm)
		- layout.item_height_mm
	)
	return (x, y)


#============================================
def sequence_placements(
	layout: GridLayout,
	quantity: int,
	image_count: int,
	side: str = SIDE_FRONT,
	rotations: list[bool] | None = None,
) -> collections.abc.Iterator[PlacementRecord]:
	"""
	Yield placement records sheet by sheet in row-major order.

	Stops as soon as quantity items are placed, so the final sheet may
	be partial. Back sides mirror the column; oversized layouts center
	their single item and never mirror. Artwork cycles through the
	image list by item index.

	Args:
		layout: Packed layout.
		quantity: Number of items to place.
		image_count: Number of artworks for this side.
		side: SIDE_FRONT or SIDE_BACK.
		rotations: Optional rotate flag per artwork.

	Yields:
		PlacementRecord entries.
	"""
	if quantity <= 0 or image_count <= 0:
		return
	mirrored = side == SIDE_BACK and not layout.oversized
	item_index = 0
	sheet_index = 0
	while item_index < quantity:
		for row in range(layout.rows):
			for col in range(layout.cols):
				if item_index >= quantity:
					return
				slot_col = mirror_column(col, layout.cols) if mirrored else col
				x, y = compute_slot_position(layout, row, slot_col)
				image_index = item_index % image_count
				rotate = False
				if rotations is not None and image_index < len(rotations):
					rotate = rotations[image_index]
				yield PlacementRecord(
					sheet_index=sheet_index,
					row=row,
					col=slot_col,
					x_mm=x,
					y_mm=y,
					rotate=rotate,
					image_index=image_index,
					side=side,
				)
				item_index += 1
		sheet_index += 1
