#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Impose business cards, custom items, or canvas wraps onto A-series PDF sheets.
"""

import sheet_imposer.cli


if __name__ == "__main__":
	sheet_imposer.cli.main()
