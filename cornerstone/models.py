from sqlalchemy import Column, Float, ForeignKey, Integer, String

from .database import Base


class WorkItem(Base):
    __tablename__ = "work_items"

    id = Column(String(64), primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    created_at = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)


class BudgetCategory(Base):
    __tablename__ = "budget_categories"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(500), nullable=True)
    color = Column(String(16), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0, index=True)
    created_at = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)


class BudgetSource(Base):
    __tablename__ = "budget_sources"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    source_type = Column(String(32), nullable=False, default="other")  # bank_loan|credit_line|savings|other
    total_amount = Column(Float, nullable=False)
    interest_rate = Column(Float, nullable=True)
    terms = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    status = Column(String(32), nullable=False, default="active", index=True)  # active|exhausted|closed
    created_at = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    specialty = Column(String(200), nullable=True)


class WorkItemBudget(Base):
    __tablename__ = "work_item_budgets"

    id = Column(String(64), primary_key=True, index=True)
    work_item_id = Column(String(64), ForeignKey("work_items.id"), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    planned_amount = Column(Float, nullable=False, default=0.0)
    confidence = Column(String(32), nullable=False, default="own_estimate")
    budget_category_id = Column(String(64), ForeignKey("budget_categories.id"), nullable=True, index=True)
    budget_source_id = Column(String(64), ForeignKey("budget_sources.id"), nullable=True, index=True)
    vendor_id = Column(String(64), ForeignKey("vendors.id"), nullable=True, index=True)
    created_at = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(String(64), primary_key=True, index=True)
    vendor_id = Column(String(64), ForeignKey("vendors.id"), nullable=False, index=True)
    work_item_budget_id = Column(String(64), ForeignKey("work_item_budgets.id"), nullable=True, index=True)
    invoice_number = Column(String(64), nullable=True)
    amount = Column(Float, nullable=False)
    date = Column(String, nullable=False, index=True)
    status = Column(String(32), nullable=False, default="pending", index=True)  # pending|paid|claimed
    notes = Column(String, nullable=True)
    created_at = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)


class SubsidyProgram(Base):
    __tablename__ = "subsidy_programs"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(String, nullable=True)
    reduction_type = Column(String(32), nullable=False)  # percentage|fixed
    reduction_value = Column(Float, nullable=False)
    application_status = Column(String(32), nullable=False, default="eligible", index=True)
    application_deadline = Column(String, nullable=True)
    created_at = Column(String, nullable=True)
    updated_at = Column(String, nullable=True)


class SubsidyProgramCategory(Base):
    __tablename__ = "subsidy_program_categories"

    subsidy_program_id = Column(String(64), ForeignKey("subsidy_programs.id"), primary_key=True)
    budget_category_id = Column(String(64), ForeignKey("budget_categories.id"), primary_key=True, index=True)


class WorkItemSubsidy(Base):
    __tablename__ = "work_item_subsidies"

    work_item_id = Column(String(64), ForeignKey("work_items.id"), primary_key=True)
    subsidy_program_id = Column(String(64), ForeignKey("subsidy_programs.id"), primary_key=True, index=True)
