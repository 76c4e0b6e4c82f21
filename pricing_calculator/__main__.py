"""Allow running as: python -m pricing_calculator"""

from pricing_calculator.main import main

if __name__ == "__main__":
    main()
