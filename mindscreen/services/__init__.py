"""Mindscreen microservices.

- Scoring Service: turns a screening submission into pillar scores,
  a wellness score and an escalation tier, and stores the result
"""
