"""Terraform sample code and keywords used to exercise the editor."""

from typing import Dict, List, Optional

TERRAFORM_SAMPLES: Dict[str, str] = {
    "basicResource": """resource "aws_instance" "example" {
  ami           = "ami-0c55b159cbfafe1f0"
  instance_type = "t2.micro"

  tags = {
    Name = "ExampleInstance"
  }
}""",
    "variables": """variable "region" {
  description = "AWS region"
  type        = string
  default     = "us-west-2"
}

variable "instance_count" {
  description = "Number of instances"
  type        = number
  default     = 3
}""",
    "outputs": """output "instance_ip" {
  description = "The public IP of the instance"
  value       = aws_instance.example.public_ip
}""",
    "modules": """module "vpc" {
  source  = "terraform-aws-modules/vpc/aws"
  version = "3.0.0"

  name = "my-vpc"
  cidr = "10.0.0.0/16"
}""",
    "dataSources": """data "aws_ami" "ubuntu" {
  most_recent = true

  filter {
    name   = "name"
    values = ["ubuntu/images/hcl-*"]
  }
}""",
    "locals": """locals {
  common_tags = {
    Environment = "production"
    Project     = "example"
  }

  instance_count = 5
}""",
    "terraformBlock": """terraform {
  required_version = ">= 1.0"

  required_providers {
    aws = {
      source  = "hashicorp/aws"
      version = "~> 4.0"
    }
  }
}""",
    "provider": """provider "aws" {
  region = var.region

  default_tags {
    tags = local.common_tags
  }
}""",
    "comments": """# This is a single-line comment
resource "aws_instance" "example" {
  # Another comment
  ami = "ami-12345678"

  /*
   * This is a multi-line comment
   * spanning multiple lines
   */
  instance_type = "t2.micro"
}""",
    "numbersAndOperators": """locals {
  count = 10
  price = 99.99
  total = count * price

  is_production = true
  is_enabled    = false

  result = 5 + 3 - 2 * 4 / 2
}""",
    "complexNested": """resource "aws_security_group" "example" {
  name        = "example-sg"
  description = "Example security group"

  ingress {
    from_port   = 443
    to_port     = 443
    protocol    = "tcp"
    cidr_blocks = ["0.0.0.0/0"]
  }

  egress {
    from_port   = 0
    to_port     = 0
    protocol    = "-1"
    cidr_blocks = ["0.0.0.0/0"]
  }

  tags = merge(
    local.common_tags,
    {
      Name = "example-sg"
    }
  )
}""",
    "stringInterpolation": """resource "aws_instance" "example" {
  ami           = data.aws_ami.ubuntu.id
  instance_type = var.instance_type

  tags = {
    Name = "${var.project_name}-instance-${var.environment}"
  }

  user_data = <<-EOF
    #!/bin/bash
    echo "Hello, World!"
    apt-get update
  EOF
}""",
}

TERRAFORM_KEYWORDS: List[str] = [
    "resource",
    "variable",
    "output",
    "module",
    "data",
    "locals",
    "terraform",
    "provider",
    "required_version",
    "required_providers",
    "source",
    "version",
    "default",
    "description",
    "type",
    "string",
    "number",
    "bool",
    "list",
    "map",
    "object",
    "set",
    "tuple",
    "any",
    "for_each",
    "count",
    "depends_on",
    "lifecycle",
    "provisioner",
    "connection",
]


def sample_names() -> List[str]:
    return list(TERRAFORM_SAMPLES)


def get_sample(name: str) -> Optional[str]:
    return TERRAFORM_SAMPLES.get(name)


def parse_keywords(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(TERRAFORM_KEYWORDS)
    keywords = [k.strip() for k in raw.split(",") if k.strip()]
    return keywords or list(TERRAFORM_KEYWORDS)
