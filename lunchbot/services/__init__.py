from lunchbot.services.command_parser import Command, parse_line, parse_options
from lunchbot.services.command_service import CommandService
from lunchbot.services.line_service import LineService, SignatureError, verify_signature
from lunchbot.services.sampler import weighted_pick
from lunchbot.services.shop_store import ShopStore
