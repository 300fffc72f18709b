"""Data-assembly services: range selection, column mapping, masking, merging,
installment schedules and placeholder instructions."""
