from enum import Enum

class SupportTier(str, Enum):
    STANDARD = "standard"
    PREMIUM = "premium"
    ENTERPRISE = "enterprise"

class ContractLength(str, Enum):
    MONTHLY = "monthly"
    ANNUAL = "annual"

class TierName(str, Enum):
    STARTER = "Starter"
    PROFESSIONAL = "Professional"
    ENTERPRISE = "Enterprise"

class BillingCycle(str, Enum):
    ONETIME = "onetime"
    SUBSCRIPTION = "subscription"

class ValidationReason(str, Enum):
    REQUIRED = "required"
    MUST_BE_POSITIVE = "must_be_positive"
    MUST_BE_NON_NEGATIVE = "must_be_non_negative"
    MUST_BE_INTEGER = "must_be_integer"
    OUT_OF_RANGE = "out_of_range"
    INVALID_ENUM = "invalid_enum"

class PricePosition(str, Enum):
    SIGNIFICANTLY_UNDERPRICED = "Significantly Underpriced"
    MODERATELY_UNDERPRICED = "Moderately Underpriced"
    OPTIMALLY_PRICED = "Optimally Priced"
    POTENTIALLY_OVERPRICED = "Potentially Overpriced"

class CompetitivePosition(str, Enum):
    PREMIUM = "premium"
    PARITY = "parity"
    VALUE = "value"

class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

class AnalysisType(str, Enum):
    PRICING = "pricing"
    COMPETITIVE = "competitive"
    MARKET = "market"
    COMPREHENSIVE = "comprehensive"
