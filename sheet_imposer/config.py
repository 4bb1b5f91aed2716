"""
Shared configuration, constants, and value types.
"""

import dataclasses


POINTS_PER_MM = 2.834645669

DEFAULT_SPACING_MM = 1.0
DEFAULT_BLEED_MM = 0.0
DEFAULT_EFFICIENCY_THRESHOLD = 0.15
MAX_QUANTITY = 10000
MIN_ITEM_MM = 10.0
MAX_ITEM_MM = 2000.0

BUSINESS_CARD_WIDTH = 90.0
BUSINESS_CARD_HEIGHT = 50.0
DEFAULT_CANVAS_THICKNESS = 35.0
DEFAULT_CANVAS_EXTRA = 5.0

OVERSIZED_SAFE_MARGIN_MM = 5.0
BORDER_GRAY = 0.8
BORDER_WIDTH = 1.0
PLACEHOLDER_FILL_GRAY = 0.95
PLACEHOLDER_STROKE_GRAY = 0.7
PLACEHOLDER_FONT = "Helvetica"
PLACEHOLDER_FONT_SIZE = 7.0
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

SIDE_FRONT = "front"
SIDE_BACK = "back"


@dataclasses.dataclass(frozen=True)
class SheetSize:
	name: str
	width_mm: float
	height_mm: float


SHEET_CATALOG = (
	SheetSize("A4", 210.0, 297.0),
	SheetSize("A3", 297.0, 420.0),
	SheetSize("A2", 420.0, 594.0),
	SheetSize("A1", 594.0, 841.0),
	SheetSize("A0", 841.0, 1189.0),
)


@dataclasses.dataclass(frozen=True)
class ItemSpec:
	width_mm: float
	height_mm: float
	spacing_mm: float = DEFAULT_SPACING_MM
	bleed_mm: float = DEFAULT_BLEED_MM

	@property
	def effective_width_mm(self) -> float:
		return self.width_mm + 2.0 * self.bleed_mm

	@property
	def effective_height_mm(self) -> float:
		return self.height_mm + 2.0 * self.bleed_mm


@dataclasses.dataclass(frozen=True)
class GridLayout:
	cols: int
	rows: int
	items_per_sheet: int
	margin_horizontal_mm: float
	margin_vertical_mm: float
	sheet: SheetSize
	item_width_mm: float
	item_height_mm: float
	spacing_mm: float
	oversized: bool


@dataclasses.dataclass(frozen=True)
class SheetSelection:
	layout: GridLayout
	sheet: SheetSize
	efficiency: float


@dataclasses.dataclass(frozen=True)
class PlacementRecord:
	sheet_index: int
	row: int
	col: int
	x_mm: float
	y_mm: float
	rotate: bool
	image_index: int
	side: str = SIDE_FRONT


@dataclasses.dataclass(frozen=True)
class ProductPolicy:
	key: str
	label: str
	bleed_mm: float
	spacing_mm: float
	sheet_names: tuple[str, ...]
	efficiency_threshold: float
	fixed_width_mm: float | None
	fixed_height_mm: float | None
	min_item_mm: float
	max_item_mm: float
	auto_rotate: bool
	match_sheet_orientation: bool
	draw_borders: bool
	borders_when_oversized: bool
	fill_last_sheet: bool
	shrink_oversized: bool


@dataclasses.dataclass(frozen=True)
class CanvasPreset:
	key: str
	label: str
	width_mm: float
	height_mm: float


@dataclasses.dataclass(frozen=True)
class PrintRequest:
	product: ProductPolicy
	width_mm: float
	height_mm: float
	front_count: int
	back_count: int = 0
	quantity: int | None = None
	sheets: int | None = None
	sheet_name: str | None = None
	double_sided: bool = False
	bleed_mm: float | None = None
	spacing_mm: float | None = None
	efficiency_threshold: float | None = None
	match_orientation: bool = True


@dataclasses.dataclass
class LayoutPlan:
	product: ProductPolicy
	item: ItemSpec
	layout: GridLayout
	efficiency: float
	quantity: int
	total_sheets: int
	double_sided: bool
	front_rotations: list[bool]
	back_rotations: list[bool]
	front_count: int
	back_count: int


@dataclasses.dataclass
class RenderResult:
	pages: int
	front_pages: int
	back_pages: int
	placed_items: int
	placeholders: int


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeters value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_MM
